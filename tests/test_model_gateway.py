"""
Tests for the model gateway and verdict normalization.
"""

import json

import pytest

from models.verdict import RiskVerdict
from services import model_gateway
from services.model_gateway import (
    NON_JSON_SUMMARY,
    ModelConfigurationError,
    ModelGateway,
    get_model_gateway,
    normalize_verdict,
)


class TestNormalizeVerdict:
    """Tests for normalize_verdict."""

    def test_non_json_degrades(self):
        """Test plain text becomes an Unknown verdict carrying the raw output."""
        verdict = normalize_verdict("not json")

        assert verdict.risk_score == 0
        assert verdict.risk_level == "Unknown"
        assert verdict.summary == NON_JSON_SUMMARY
        assert verdict.raw_output == "not json"
        assert verdict.key_findings == []

    def test_deeply_nested_json_degrades(self):
        """Test output too deep to decode degrades like any other non-JSON text."""
        text = '{"a":' * 100000
        verdict = normalize_verdict(text)

        assert verdict.risk_level == "Unknown"
        assert verdict.summary == NON_JSON_SUMMARY
        assert verdict.raw_output == text

    def test_missing_score_defaults(self):
        """Test a missing score defaults to 0 while other fields pass through."""
        payload = {
            "risk_level": "High",
            "summary": "Reverse shell on import",
            "key_findings": [
                {
                    "type": "Backdoor",
                    "description": "Opens a socket to 10.0.0.5:4444",
                    "relevant_lines": ["  3 | s.connect(('10.0.0.5', 4444))"],
                }
            ],
        }

        verdict = normalize_verdict(json.dumps(payload))

        assert verdict.risk_score == 0
        assert verdict.risk_level == "High"
        assert verdict.summary == "Reverse shell on import"
        assert [f.model_dump() for f in verdict.key_findings] == payload["key_findings"]
        assert verdict.raw_output is None

    def test_complete_verdict(self):
        verdict = normalize_verdict(
            '{"risk_score": 12, "risk_level": "Low", "summary": "Clean", "key_findings": []}'
        )
        assert (verdict.risk_score, verdict.risk_level, verdict.summary) == (12, "Low", "Clean")

    def test_each_field_defaults_independently(self):
        """Test malformed fields are replaced one by one."""
        verdict = normalize_verdict(
            '{"risk_score": "85", "risk_level": "Severe", "summary": 5, "key_findings": "none"}'
        )

        assert verdict.risk_score == 0
        assert verdict.risk_level == "Unknown"
        assert verdict.summary == "No summary available."
        assert verdict.key_findings == []

    def test_score_rounded_and_clamped(self):
        assert normalize_verdict('{"risk_score": 72.6}').risk_score == 73
        assert normalize_verdict('{"risk_score": 150}').risk_score == 100
        assert normalize_verdict('{"risk_score": -4}').risk_score == 0
        assert normalize_verdict('{"risk_score": true}').risk_score == 0

    def test_level_case_insensitive(self):
        assert normalize_verdict('{"risk_level": "critical"}').risk_level == "Critical"

    def test_fenced_json_unwrapped(self):
        """Test JSON wrapped in a markdown fence is still parsed."""
        text = 'Here you go:\n```json\n{"risk_score": 90, "risk_level": "Critical"}\n```'
        verdict = normalize_verdict(text)

        assert verdict.risk_score == 90
        assert verdict.risk_level == "Critical"
        assert verdict.raw_output is None

    def test_non_object_json_degrades(self):
        verdict = normalize_verdict("[1, 2, 3]")
        assert verdict.risk_level == "Unknown"
        assert verdict.raw_output == "[1, 2, 3]"

    def test_malformed_findings_filtered(self):
        """Test non-object findings are dropped and finding fields defaulted."""
        verdict = normalize_verdict(
            '{"key_findings": ["oops", {"description": "eval of remote code", '
            '"relevant_lines": "eval(x)"}]}'
        )

        assert len(verdict.key_findings) == 1
        finding = verdict.key_findings[0]
        assert finding.type == "Finding"
        assert finding.description == "eval of remote code"
        assert finding.relevant_lines == []

    def test_verdict_schema_example(self):
        """Test the documented example is published in the verdict schema."""
        example = RiskVerdict.model_json_schema()["example"]

        assert example["risk_level"] == "Critical"
        assert RiskVerdict(**example).risk_score == 88


class TestModelGateway:
    """Tests for ModelGateway and its lazy singleton."""

    def test_missing_key_raises_on_first_use(self, monkeypatch):
        """Test a missing credential is a configuration error at first use."""
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

        with pytest.raises(ModelConfigurationError, match="OPENROUTER_API_KEY"):
            get_model_gateway()

    def test_singleton_reused(self, monkeypatch):
        """Test the gateway is built once and reused."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "test-key")
        monkeypatch.setenv("THREATLENS_MODEL", "test/model")

        first = get_model_gateway()
        second = get_model_gateway()

        assert first is second
        assert first.model_id == "test/model"

    @pytest.mark.asyncio
    async def test_analyze_normalizes_agent_output(self, monkeypatch):
        """Test analyze passes both prompts through and normalizes the reply."""
        gateway = ModelGateway(api_key="test-key", model_id="test/model")
        calls = []

        async def fake_run_agent(system_prompt, user_content):
            calls.append((system_prompt, user_content))
            return '{"risk_score": 55, "risk_level": "Medium", "summary": "Odd"}'

        monkeypatch.setattr(gateway, "_run_agent", fake_run_agent)

        verdict = await gateway.analyze("system prompt", "context")

        assert calls == [("system prompt", "context")]
        assert verdict.risk_score == 55
        assert verdict.risk_level == "Medium"

    @pytest.mark.asyncio
    async def test_analyze_never_raises_on_garbage(self, monkeypatch):
        gateway = ModelGateway(api_key="test-key", model_id="test/model")

        async def fake_run_agent(system_prompt, user_content):
            return "I think this is probably fine?"

        monkeypatch.setattr(gateway, "_run_agent", fake_run_agent)

        verdict = await gateway.analyze("system prompt", "context")

        assert verdict.risk_level == "Unknown"
        assert verdict.raw_output == "I think this is probably fine?"

    def test_model_parameters(self):
        gateway = ModelGateway(api_key="test-key", model_id="test/model")

        assert gateway.model.temperature == model_gateway.TEMPERATURE
        assert gateway.model.max_tokens == model_gateway.MAX_OUTPUT_TOKENS
