"""Unit tests for the answers module."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from healthchat.answers import (
    StructuredAnswer,
    Urgency,
    confidence_marker,
    format_response,
    urgency_marker,
)


class TestConfidenceMarker:
    """Tests for confidence tiers."""

    @pytest.mark.parametrize("score,marker", [
        (0, "🔴"),
        (49, "🔴"),
        (50, "🟡"),
        (74, "🟡"),
        (75, "🟢"),
        (100, "🟢"),
    ])
    def test_tier_boundaries(self, score, marker):
        assert confidence_marker(score) == marker

    @given(st.integers(min_value=0, max_value=100))
    def test_every_score_has_exactly_one_tier(self, score: int):
        """Property test: tiers partition the 0-100 range."""
        expected = "🟢" if score >= 75 else "🟡" if score >= 50 else "🔴"
        assert confidence_marker(score) == expected


class TestUrgencyMarker:
    """Tests for urgency markers."""

    @pytest.mark.parametrize("urgency,marker", [
        ("EMERGENCY", "🚨"),
        ("HIGH", "⚠️"),
        ("MEDIUM", "⚡"),
        ("LOW", "ℹ️"),
        ("SOMETHING", "ℹ️"),
        (None, "ℹ️"),
        (Urgency.HIGH, "⚠️"),
        ("emergency", "🚨"),
    ])
    def test_markers(self, urgency, marker):
        assert urgency_marker(urgency) == marker


class TestFormatResponse:
    """Tests for format_response."""

    def test_plain_text_returned_verbatim(self):
        assert format_response("hello") == "hello"

    def test_deeply_nested_json_returned_verbatim(self):
        raw = "[" * 100000 + "]" * 100000
        assert format_response(raw) == raw

    def test_non_object_json_returned_verbatim(self):
        assert format_response("[1, 2]") == "[1, 2]"
        assert format_response('"quoted"') == '"quoted"'
        assert format_response("42") == "42"

    def test_confidence_then_urgency_without_bullets(self):
        text = format_response(json.dumps({"confidence_score": 80, "urgency": "EMERGENCY"}))

        assert text == "🟢 Confidence: 80%\n🚨 Urgency: EMERGENCY"
        assert text.index("🟢") < text.index("🚨")
        assert "•" not in text

    def test_section_order(self, knee_answer):
        text = format_response(knee_answer)

        headings = [
            "**Patella**",
            "🟢 Confidence: 82%",
            "⚡ Urgency: MEDIUM",
            "**Possible Causes:**",
            "🚩 **Red Flags (Seek immediate medical attention):**",
            "**Self-Care Suggestions:**",
            "🧘 **Yoga Suggestions:**",
            "🥗 **Diet Suggestions:**",
            "🔬 **Recommended Tests:**",
            "📚 **Sources:**",
            "⚕️ **This is not medical advice.**",
        ]
        positions = [text.index(h) for h in headings]
        assert positions == sorted(positions)
        assert text.endswith("⚕️ **This is not medical advice.**")

    def test_full_rendering(self, knee_answer):
        expected = (
            "**Patella**\n\n"
            "🟢 Confidence: 82%\n"
            "⚡ Urgency: MEDIUM\n\n"
            "**Possible Causes:**\n"
            "• Patellofemoral pain syndrome\n"
            "• Meniscus tear\n\n"
            "🚩 **Red Flags (Seek immediate medical attention):**\n"
            "• Unable to bear weight\n\n"
            "**Self-Care Suggestions:**\n"
            "• Rest\n"
            "• Ice for 15 minutes\n\n"
            "🧘 **Yoga Suggestions:**\n"
            "• Bridge pose\n\n"
            "🥗 **Diet Suggestions:**\n"
            "• Omega-3 rich foods\n\n"
            "🔬 **Recommended Tests:**\n"
            "• Knee X-ray\n\n"
            "📚 **Sources:**\n"
            '1. Mayo Clinic - "Knee pain is common"\n'
            "2. WHO\n\n"
            "⚕️ **This is not medical advice.**"
        )
        assert format_response(knee_answer) == expected

    def test_empty_lists_are_skipped(self):
        text = format_response(json.dumps({"urgency": "LOW", "possible_causes": [], "self_care": ["rest"]}))

        assert "Possible Causes" not in text
        assert text == "ℹ️ Urgency: LOW\n\n**Self-Care Suggestions:**\n• rest"

    def test_zero_confidence_is_rendered(self):
        assert format_response('{"confidence_score": 0}') == "🔴 Confidence: 0%"

    def test_unknown_keys_fall_back_to_json_form(self):
        record = {"answer": "drink water", "mood": "calm"}
        assert format_response(json.dumps(record)) == json.dumps(record, ensure_ascii=False)

    def test_recognized_but_empty_fields_fall_back(self):
        assert format_response('{"red_flags": []}') == '{"red_flags": []}'

    def test_wrongly_typed_fields_do_not_raise(self):
        text = format_response(json.dumps({
            "confidence_score": "high",
            "urgency": ["HIGH"],
            "self_care": "stay hydrated",
            "sources": ["NHS", {"link": "no title"}, 5],
        }))

        assert text == "**Self-Care Suggestions:**\n• stay hydrated\n\n📚 **Sources:**\n1. NHS"

    @given(st.dictionaries(st.text(), st.one_of(st.none(), st.integers(), st.text(), st.lists(st.text()))))
    def test_any_object_formats_without_error(self, record):
        """Property test: formatting is total over JSON objects."""
        result = format_response(json.dumps(record))
        assert isinstance(result, str)

    @given(st.text())
    def test_any_text_formats_without_error(self, raw: str):
        """Property test: formatting is total over arbitrary text."""
        assert isinstance(format_response(raw), str)


class TestStructuredAnswer:
    """Tests for the StructuredAnswer mapping."""

    def test_all_fields_optional(self):
        answer = StructuredAnswer.from_record({})
        assert answer.anatomical_name is None
        assert answer.confidence_score is None
        assert answer.sources == []

    def test_confidence_is_clamped_and_rounded(self):
        assert StructuredAnswer.from_record({"confidence_score": 150}).confidence_score == 100
        assert StructuredAnswer.from_record({"confidence_score": 64.6}).confidence_score == 65
        assert StructuredAnswer.from_record({"confidence_score": "70%"}).confidence_score == 70
        assert StructuredAnswer.from_record({"confidence_score": True}).confidence_score is None

    def test_urgency_level(self):
        assert StructuredAnswer.from_record({"urgency": "high"}).urgency_level == Urgency.HIGH
        assert StructuredAnswer.from_record({"urgency": "unclear"}).urgency_level is None

    def test_source_fields(self):
        answer = StructuredAnswer.from_record({
            "sources": [{"title": "WHO", "link": "https://who.int", "excerpt": "Quote"}]
        })
        source = answer.sources[0]
        assert (source.title, source.link, source.excerpt) == ("WHO", "https://who.int", "Quote")
