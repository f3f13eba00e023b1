"""
Error taxonomy for surveykit.

Recoverable errors (malformed questions, invalid surveys) are handled at the
document boundary. Contract violations (answer state wired to the wrong kind
of question) are raised and never caught inside the package.
"""


class SurveyError(Exception):
    """Base class for all surveykit errors."""
    pass


class MalformedQuestionError(SurveyError):
    """Raised when a question fragment lacks a required field or has a bad shape.

    The survey decoder catches this and drops the offending question.
    """
    pass


class InvalidSurveyError(SurveyError):
    """Raised by the strict loader when a document cannot produce a usable survey."""
    pass


class TypeMismatchError(SurveyError):
    """Raised when an answer state does not match the kind of its question.

    This indicates a caller bug and is never recovered from inside the package.
    """

    def __init__(self, question_kind, answer) -> None:
        self.question_kind = question_kind
        self.answer = answer
        super().__init__(
            f"Mismatched state and question types: {type(answer).__name__} "
            f"recorded for a {question_kind.value} question"
        )


class UnresolvedQuestionError(SurveyError):
    """Raised when a navigator target does not name a question in the survey."""

    def __init__(self, question_id: str) -> None:
        self.question_id = question_id
        super().__init__(f"Navigation target not found in survey: {question_id}")
