"""
Survey Navigation Core (surveykit)

Models a questionnaire whose question order is decided at runtime: after each
answered question, the question's navigator picks the next question id from
the answer just recorded.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Network transport of survey documents or responses
    - On-screen widgets or input capture
    - Storage of in-progress surveys

It defines survey structure, answer state, routing and the JSON documents
that carry them in and out.
"""

__version__ = "0.1.0"
