"""
Model gateway - runs analyst prompts through agno + OpenRouter and turns
whatever comes back into a well-formed RiskVerdict.
"""

import json
import math
import os
import threading
from typing import Any, List, Optional

from agno.agent import Agent
from agno.models.openrouter import OpenRouter

from env import DEFAULT_MODEL
from models.verdict import RISK_LEVELS, Finding, RiskVerdict

TEMPERATURE = 0.2
MAX_OUTPUT_TOKENS = 4096

NON_JSON_SUMMARY = "AI returned a non-JSON response. Raw output attached."
DEFAULT_SUMMARY = "No summary available."


class ModelConfigurationError(RuntimeError):
    """Raised when the model credential is missing."""


def _extract_json_text(response_text: str) -> str:
    """Strip a markdown code fence around the JSON payload, if any."""
    if "```json" in response_text:
        json_start = response_text.find("```json") + 7
        json_end = response_text.find("```", json_start)
        return response_text[json_start:json_end].strip()
    if "```" in response_text:
        json_start = response_text.find("```") + 3
        json_end = response_text.find("```", json_start)
        return response_text[json_start:json_end].strip()
    return response_text


def _parse_json_object(response_text: str) -> Optional[dict]:
    for candidate in (response_text, _extract_json_text(response_text)):
        try:
            parsed = json.loads(candidate)
        except (ValueError, TypeError, RecursionError):
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def _normalize_score(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, min(100, int(round(value))))


def _normalize_level(value: Any) -> str:
    if isinstance(value, str):
        for level in RISK_LEVELS:
            if value.strip().lower() == level.lower():
                return level
    return "Unknown"


def _normalize_findings(value: Any) -> List[Finding]:
    if not isinstance(value, list):
        return []
    findings = []
    for item in value:
        if not isinstance(item, dict):
            continue
        lines = item.get("relevant_lines")
        findings.append(
            Finding(
                type=str(item.get("type") or "Finding"),
                description=str(item.get("description") or ""),
                relevant_lines=[str(line) for line in lines] if isinstance(lines, list) else [],
            )
        )
    return findings


def normalize_verdict(response_text: str) -> RiskVerdict:
    """
    Build a RiskVerdict from raw model text.

    Never raises: unparseable text yields a degraded "Unknown" verdict
    carrying the raw output, and each field of a parsed object is
    defaulted on its own when missing or malformed.
    """
    parsed = _parse_json_object(response_text)
    if parsed is None:
        print(f"[model_gateway] WARNING: Non-JSON model response: {response_text[:500]}")
        return RiskVerdict(
            risk_score=0,
            risk_level="Unknown",
            summary=NON_JSON_SUMMARY,
            key_findings=[],
            raw_output=response_text,
        )

    summary = parsed.get("summary")
    raw_output = parsed.get("raw_output")
    return RiskVerdict(
        risk_score=_normalize_score(parsed.get("risk_score")),
        risk_level=_normalize_level(parsed.get("risk_level")),
        summary=summary if isinstance(summary, str) and summary else DEFAULT_SUMMARY,
        key_findings=_normalize_findings(parsed.get("key_findings")),
        raw_output=raw_output if isinstance(raw_output, str) and raw_output else None,
    )


class ModelGateway:
    """
    Wraps the external LLM behind a single analyze() call.

    The OpenRouter model handle is built once and shared; a fresh agno
    Agent is assembled per call because the system prompt varies.
    """

    def __init__(self, api_key: str, model_id: str = DEFAULT_MODEL):
        """
        Initialize the gateway.

        Args:
            api_key: OpenRouter API key
            model_id: OpenRouter model id
        """
        self.model_id = model_id
        self.model = OpenRouter(
            id=model_id,
            api_key=api_key,
            temperature=TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
            request_params={"response_format": {"type": "json_object"}},
        )

    async def _run_agent(self, system_prompt: str, user_content: str) -> str:
        """Run one agent turn and return the raw response text."""
        agent = Agent(
            name="ThreatLensAnalyst",
            model=self.model,
            instructions=system_prompt,
            markdown=False,
        )
        response = await agent.arun(user_content)

        if hasattr(response, "content"):
            content = response.content
            return content if isinstance(content, str) else json.dumps(content, default=str)
        return str(response)

    async def analyze(self, system_prompt: str, user_content: str) -> RiskVerdict:
        """
        Score preprocessed context with the given analyst prompt.

        Args:
            system_prompt: Analyst role instruction
            user_content: Preprocessed context string

        Returns:
            Normalized RiskVerdict
        """
        response_text = await self._run_agent(system_prompt, user_content)
        return normalize_verdict(response_text)


_model_gateway: Optional[ModelGateway] = None
_model_gateway_lock = threading.Lock()


def get_model_gateway() -> ModelGateway:
    """
    Get or create the process-wide model gateway.

    The credential is read on first use, not at startup.

    Raises:
        ModelConfigurationError: If OPENROUTER_API_KEY is not set
    """
    global _model_gateway
    if _model_gateway is not None:
        return _model_gateway

    with _model_gateway_lock:
        if _model_gateway is None:
            api_key = os.getenv("OPENROUTER_API_KEY")
            if not api_key:
                raise ModelConfigurationError(
                    "OPENROUTER_API_KEY is not set. Add your OpenRouter API key to the .env file."
                )
            model_id = os.getenv("THREATLENS_MODEL", DEFAULT_MODEL)
            _model_gateway = ModelGateway(api_key=api_key, model_id=model_id)
            print(f"[model_gateway] Initialized model gateway ({model_id})")
    return _model_gateway


def reset_model_gateway() -> None:
    """Drop the cached gateway so the next call re-reads configuration."""
    global _model_gateway
    with _model_gateway_lock:
        _model_gateway = None
