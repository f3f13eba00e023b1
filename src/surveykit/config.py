"""Configuration for response documents.

Settings come from the environment so a host application can set them once
without threading them through every call:

- `SURVEYKIT_OPERATING_SYSTEM`: platform identifier reported in responses.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_OPERATING_SYSTEM = "SURVEYKIT_OPERATING_SYSTEM"
DEFAULT_OPERATING_SYSTEM = "python"


class ResponseSettings(BaseSettings):
    """Response settings loaded from the environment."""

    operating_system: str = Field(default=DEFAULT_OPERATING_SYSTEM, alias=ENV_OPERATING_SYSTEM)

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("operating_system", mode="before")
    @classmethod
    def blank_means_default(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                logger.warning("%s is blank; using %r", ENV_OPERATING_SYSTEM, DEFAULT_OPERATING_SYSTEM)
                return DEFAULT_OPERATING_SYSTEM
        return v


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ResponseSettings:
    """Build ResponseSettings from the process environment, or from `environ` when given.

    A blank operating system value is ignored in favour of the default.
    """
    if environ is None:
        return ResponseSettings()
    # Init values given by alias outrank the process environment
    return ResponseSettings(**{ENV_OPERATING_SYSTEM: environ.get(ENV_OPERATING_SYSTEM, DEFAULT_OPERATING_SYSTEM)})
