"""Rendering of assistant replies for display.

Hides the details of envelope parsing, section ordering and severity
markers. Replies that are not a JSON object are shown verbatim.
"""

import json
import logging
from typing import Any

from ..config import CONFIDENCE_HIGH, CONFIDENCE_MEDIUM
from .models import StructuredAnswer, Urgency

logger = logging.getLogger(__name__)

CONFIDENCE_MARKERS = {
    "high": "🟢",
    "medium": "🟡",
    "low": "🔴",
}

URGENCY_MARKERS = {
    Urgency.EMERGENCY: "🚨",
    Urgency.HIGH: "⚠️",
    Urgency.MEDIUM: "⚡",
}
INFO_MARKER = "ℹ️"

BULLET = "•"

# (field, section title) in display order
LIST_SECTIONS = (
    ("possible_causes", "**Possible Causes:**"),
    ("red_flags", "🚩 **Red Flags (Seek immediate medical attention):**"),
    ("self_care", "**Self-Care Suggestions:**"),
    ("yoga_suggestions", "🧘 **Yoga Suggestions:**"),
    ("diet_suggestions", "🥗 **Diet Suggestions:**"),
    ("recommended_tests", "🔬 **Recommended Tests:**"),
)
SOURCES_TITLE = "📚 **Sources:**"
DISCLAIMER_MARKER = "⚕️"


def confidence_marker(score: int) -> str:
    """Marker for a confidence score: high >= 75, medium >= 50, else low."""
    if score >= CONFIDENCE_HIGH:
        return CONFIDENCE_MARKERS["high"]
    if score >= CONFIDENCE_MEDIUM:
        return CONFIDENCE_MARKERS["medium"]
    return CONFIDENCE_MARKERS["low"]


def urgency_marker(urgency: str | Urgency | None) -> str:
    """Marker for an urgency level. Unknown and LOW levels are informational."""
    if urgency is None:
        return INFO_MARKER
    try:
        level = Urgency(str(getattr(urgency, "value", urgency)).upper())
    except ValueError:
        return INFO_MARKER
    return URGENCY_MARKERS.get(level, INFO_MARKER)


def _bullets(items: list[str]) -> str:
    return "\n".join(f"{BULLET} {item}" for item in items)


def render_answer(answer: StructuredAnswer) -> str:
    """Render a structured answer in fixed section order.

    Returns:
        Display text, or an empty string when no section applies
    """
    blocks: list[str] = []

    if answer.anatomical_name:
        blocks.append(f"**{answer.anatomical_name}**")

    status_lines = []
    if answer.confidence_score is not None:
        marker = confidence_marker(answer.confidence_score)
        status_lines.append(f"{marker} Confidence: {answer.confidence_score}%")
    if answer.urgency:
        status_lines.append(f"{urgency_marker(answer.urgency)} Urgency: {answer.urgency}")
    if status_lines:
        blocks.append("\n".join(status_lines))

    for field_name, title in LIST_SECTIONS:
        items = getattr(answer, field_name)
        if items:
            blocks.append(f"{title}\n{_bullets(items)}")

    if answer.sources:
        lines = []
        for i, source in enumerate(answer.sources, 1):
            line = f"{i}. {source.title}"
            if source.excerpt:
                line += f' - "{source.excerpt}"'
            lines.append(line)
        blocks.append(SOURCES_TITLE + "\n" + "\n".join(lines))

    if answer.disclaimer:
        blocks.append(f"{DISCLAIMER_MARKER} **{answer.disclaimer}**")

    return "\n\n".join(blocks)


def parse_envelope(raw_text: str) -> dict[str, Any] | None:
    """Parse raw text as a JSON object, or return None."""
    try:
        parsed = json.loads(raw_text)
    except (ValueError, TypeError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def format_response(raw_text: str) -> str:
    """Format an assistant reply for display.

    Args:
        raw_text: Reply text, either free text or a serialized structured answer

    Returns:
        Rendered answer; ``raw_text`` unchanged when it is not a JSON object;
        the JSON form of the object when it carries no recognized field
    """
    record = parse_envelope(raw_text)
    if record is None:
        logger.debug("Reply is not a structured answer, showing verbatim")
        return raw_text

    rendered = render_answer(StructuredAnswer.from_record(record))
    if not rendered:
        logger.debug("Structured answer has no recognized fields")
        return json.dumps(record, ensure_ascii=False)
    return rendered
