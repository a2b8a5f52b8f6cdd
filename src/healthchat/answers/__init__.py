"""Structured answer parsing and display formatting."""

from .formatter import (
    confidence_marker,
    format_response,
    parse_envelope,
    render_answer,
    urgency_marker,
)
from .models import AnswerSource, StructuredAnswer, Urgency

__all__ = [
    "AnswerSource",
    "StructuredAnswer",
    "Urgency",
    "confidence_marker",
    "format_response",
    "parse_envelope",
    "render_answer",
    "urgency_marker",
]
