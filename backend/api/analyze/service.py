from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from env import APP_ENV
from models.verdict import RiskVerdict
from prompts import CODE_ANALYST_PROMPT, PACKAGE_ANALYST_PROMPT, URL_ANALYST_PROMPT
from services.code_preprocessor import preprocess_code
from services.model_gateway import ModelGateway, get_model_gateway
from services.package_preprocessor import preprocess_package
from services.url_preprocessor import preprocess_url

GENERIC_ERROR_MESSAGE = "Internal server error"


class AnalysisInputError(ValueError):
    """Client-side validation failure; nothing downstream has run."""


@dataclass(frozen=True)
class AnalysisPipeline:
    """Preprocessor and analyst prompt for one input kind."""
    preprocess: Callable[[str], Awaitable[str]]
    system_prompt: str


PIPELINES: Dict[str, AnalysisPipeline] = {
    "code": AnalysisPipeline(preprocess_code, CODE_ANALYST_PROMPT),
    "package": AnalysisPipeline(preprocess_package, PACKAGE_ANALYST_PROMPT),
    "url": AnalysisPipeline(preprocess_url, URL_ANALYST_PROMPT),
}

VALID_TYPES = tuple(PIPELINES)


def validate_analysis_request(kind: Any, content: Any) -> None:
    """
    Check a request in fixed order; the first violation wins.

    Raises:
        AnalysisInputError: With a message specific to the violated rule
    """
    if not kind or not content:
        raise AnalysisInputError('Both "type" and "content" fields are required.')

    if not isinstance(kind, str) or kind not in PIPELINES:
        raise AnalysisInputError(
            f'Invalid type "{kind}". Must be one of: {", ".join(VALID_TYPES)}'
        )

    if not isinstance(content, str) or not content.strip():
        raise AnalysisInputError('"content" must be a non-empty string.')


async def run_analysis(
    kind: str, content: str, gateway: Optional[ModelGateway] = None
) -> RiskVerdict:
    """
    Preprocess validated input and score it with the model.

    Args:
        kind: One of VALID_TYPES
        content: Raw user content
        gateway: Model gateway override (defaults to the shared gateway)

    Returns:
        Normalized RiskVerdict
    """
    pipeline = PIPELINES[kind]

    print(f"[analyze] Analyzing [{kind.upper()}]: {content[:80]}...")

    context = await pipeline.preprocess(content)
    print("[analyze] Pre-processing complete")

    gateway = gateway or get_model_gateway()
    verdict = await gateway.analyze(pipeline.system_prompt, context)
    print(f"[analyze] AI analysis complete ({verdict.risk_level}, {verdict.risk_score})")

    return verdict


def public_error_message(error: Exception, app_env: Optional[str] = None) -> str:
    """Hide internal error details in production."""
    if (app_env or APP_ENV) == "production":
        return GENERIC_ERROR_MESSAGE
    return str(error) or GENERIC_ERROR_MESSAGE
