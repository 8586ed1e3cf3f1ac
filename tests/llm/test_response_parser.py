"""
Unit Tests for analysis response extraction.

Run: python -m pytest tests/llm/test_response_parser.py -v
"""

import json

import pytest

from core.exceptions import MalformedResponseError
from core.structured_log import read_recent_logs
from llm.response_parser import parse_analysis_text, strip_json_fence
from tests.fixtures.llm_mocks import ANALYSIS_PAYLOAD, analysis_payload, fenced


class TestStripJsonFence:
    """Fence stripping is literal: exact marker lengths, nothing more."""

    def test_plain_json_untouched(self):
        assert strip_json_fence('{"a": 1}') == '{"a": 1}'

    def test_surrounding_whitespace_trimmed(self):
        assert strip_json_fence('  \n{"a": 1}\n\t ') == '{"a": 1}'

    def test_json_fence_removed(self):
        assert strip_json_fence('```json\n{"a": 1}\n```') == '\n{"a": 1}\n'

    def test_fence_without_json_tag_keeps_opening(self):
        # Only the closing marker matches; the bare opening fence stays
        assert strip_json_fence('```\n{"a": 1}\n```') == '```\n{"a": 1}\n'

    def test_closing_fence_only(self):
        assert strip_json_fence('{"a": 1}```') == '{"a": 1}'

    def test_opening_fence_only(self):
        assert strip_json_fence('```json{"a": 1}') == '{"a": 1}'

    def test_uppercase_tag_not_stripped(self):
        assert strip_json_fence('```JSON\n{}\n```').startswith("```JSON")

    def test_leading_prose_prevents_stripping(self):
        text = 'Here you go:\n```json\n{}\n```'
        assert strip_json_fence(text) == 'Here you go:\n```json\n{}\n'


class TestParseAnalysisText:

    def test_fenced_equals_unfenced(self):
        unfenced = parse_analysis_text(json.dumps(ANALYSIS_PAYLOAD))
        from_fence = parse_analysis_text(fenced(ANALYSIS_PAYLOAD))
        assert from_fence == unfenced

    def test_fields_match_payload(self):
        result = parse_analysis_text(fenced(ANALYSIS_PAYLOAD))
        assert result.to_dict() == ANALYSIS_PAYLOAD
        assert result.overall_assessment == ANALYSIS_PAYLOAD["overallAssessment"]
        assert [c.compliant for c in result.rule_compliance_check] == [False, True]
        assert result.suggested_correction.startswith("await new Promise")

    def test_optional_fields_may_be_missing(self):
        payload = analysis_payload()
        del payload["suggestedCorrection"]
        del payload["costOptimization"]
        result = parse_analysis_text(json.dumps(payload))
        assert result.suggested_correction is None
        assert result.cost_optimization is None

    def test_optional_fields_may_be_null(self):
        result = parse_analysis_text(json.dumps(analysis_payload(costOptimization=None)))
        assert result.cost_optimization is None

    @pytest.mark.parametrize("text", [
        "",
        "not json at all",
        "```json\n{\"overallAssessment\": \n```",
        "[]",
        "\"just a string\"",
        "{}",
        "{\"overallAssessment\": " + "1" * 5000 + "}",
        "[" * 100000 + "]" * 100000,
    ])
    def test_invalid_text_raises_malformed(self, text):
        with pytest.raises(MalformedResponseError):
            parse_analysis_text(text)

    def test_missing_required_key_is_malformed(self):
        payload = analysis_payload()
        del payload["detailedAnalysis"]
        with pytest.raises(MalformedResponseError):
            parse_analysis_text(json.dumps(payload))

    def test_non_boolean_compliant_is_malformed(self):
        payload = analysis_payload(ruleComplianceCheck=[{"rule": "r", "compliant": "yes", "details": "d"}])
        with pytest.raises(MalformedResponseError):
            parse_analysis_text(json.dumps(payload))

    def test_error_message_does_not_leak_raw_text(self):
        raw = "SECRET-MODEL-OUTPUT that is not json"
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_analysis_text(raw)
        assert "SECRET-MODEL-OUTPUT" not in exc_info.value.message
        assert "SECRET-MODEL-OUTPUT" not in str(exc_info.value)
        assert exc_info.value.message == (
            "Failed to parse analysis from AI. The response was not valid JSON."
        )

    def test_raw_text_kept_in_event_log(self):
        raw = "definitely { not json"
        with pytest.raises(MalformedResponseError):
            parse_analysis_text(raw)
        events = read_recent_logs(level="ERROR")
        assert events[-1]["event"] == "analysis_parse_failed"
        assert events[-1]["raw_text"] == raw
