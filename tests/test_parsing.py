"""Tests for strict parsing of provider JSON output."""
import pytest

from src.content.schemas import QualityScores
from src.llm.parsing import parse_json_response, parse_structured_response
from src.shared.errors import ParseError


class TestParseJsonResponse:
    @pytest.mark.parametrize(
        "text",
        [
            '{"a":1}',
            '```json\n{"a":1}\n```',
            '```\n{"a":1}\n```',
            '  \n```json\n{"a":1}\n```\n  ',
            '```json{"a":1}```',
        ],
    )
    def test_accepts_bare_and_fenced_objects(self, text):
        assert parse_json_response(text) == {"a": 1}

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "",
            'Here you go: {"a":1}',
            '```json\n{"a":1}\n```\nHope this helps!',
            '[{"a":1}]',
            '"just a string"',
        ],
    )
    def test_rejects_anything_else(self, text):
        with pytest.raises(ParseError):
            parse_json_response(text)

    def test_parse_error_keeps_raw_text(self):
        with pytest.raises(ParseError) as exc_info:
            parse_json_response("not json")
        assert exc_info.value.raw == "not json"


class TestParseStructuredResponse:
    def test_missing_required_fields(self):
        with pytest.raises(ParseError) as exc_info:
            parse_structured_response('{"overall_score": 80}', QualityScores)
        assert "seo_score" in str(exc_info.value)

    def test_out_of_range_score(self):
        payload = (
            '{"overall_score": 120, "seo_score": 1, "readability_score": 1, "authority_score": 1,'
            ' "engagement_score": 1, "aeo_score": 1, "detailed_feedback": {"strengths": [],'
            ' "improvements": [], "seo_feedback": "", "readability_feedback": "",'
            ' "authority_feedback": "", "engagement_feedback": "", "aeo_feedback": ""}}'
        )
        with pytest.raises(ParseError):
            parse_structured_response(payload, QualityScores)
