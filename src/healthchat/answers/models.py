"""Structured answer envelope returned by the assistant.

Every field is optional. ``StructuredAnswer.from_record`` maps any parsed
JSON object onto the model without raising: unknown keys are ignored and
values of the wrong type are coerced when unambiguous, dropped otherwise.
"""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Urgency(str, Enum):
    """Urgency levels the assistant is asked to use."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EMERGENCY = "EMERGENCY"


class AnswerSource(BaseModel):
    """A cited source."""

    model_config = ConfigDict(frozen=True)

    title: str
    link: str | None = None
    excerpt: str | None = None


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_source(value: Any) -> AnswerSource | None:
    if isinstance(value, str):
        return AnswerSource(title=value.strip()) if value.strip() else None
    if not isinstance(value, dict):
        return None
    title = _as_text(value.get("title"))
    if title is None:
        return None
    return AnswerSource(
        title=title,
        link=_as_text(value.get("link")),
        excerpt=_as_text(value.get("excerpt")),
    )


class StructuredAnswer(BaseModel):
    """Medical answer envelope with all fields optional."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    anatomical_name: str | None = None
    confidence_score: int | None = Field(default=None, ge=0, le=100)
    urgency: str | None = None
    possible_causes: list[str] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    self_care: list[str] = Field(default_factory=list)
    yoga_suggestions: list[str] = Field(default_factory=list)
    diet_suggestions: list[str] = Field(default_factory=list)
    recommended_tests: list[str] = Field(default_factory=list)
    sources: list[AnswerSource] = Field(default_factory=list)
    disclaimer: str | None = None

    @field_validator("anatomical_name", "urgency", "disclaimer", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _as_text(value)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            try:
                value = float(value.strip().rstrip("%"))
            except ValueError:
                return None
        if isinstance(value, int):
            return max(0, min(100, value))
        if isinstance(value, float) and math.isfinite(value):
            return max(0, min(100, round(value)))
        return None

    @field_validator(
        "possible_causes",
        "red_flags",
        "self_care",
        "yoga_suggestions",
        "diet_suggestions",
        "recommended_tests",
        mode="before",
    )
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return []
        return [text for text in (_as_text(item) for item in value) if text is not None]

    @field_validator("sources", mode="before")
    @classmethod
    def _coerce_sources(cls, value: Any) -> list[AnswerSource]:
        if isinstance(value, (str, dict)):
            value = [value]
        if not isinstance(value, list):
            return []
        return [src for src in (_as_source(item) for item in value) if src is not None]

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "StructuredAnswer":
        """Map a parsed JSON object onto a StructuredAnswer. Never raises."""
        return cls.model_validate(record)

    @property
    def urgency_level(self) -> Urgency | None:
        """Recognized urgency level, or None for absent/unknown values."""
        if self.urgency is None:
            return None
        try:
            return Urgency(self.urgency.upper())
        except ValueError:
            return None
