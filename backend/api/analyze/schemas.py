"""
Analyze API request/response schemas.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from models.verdict import RiskVerdict


class AnalyzeRequest(BaseModel):
    """
    Analysis request.

    Fields are loose; the dispatcher validates them so each
    violation gets its own client-error message.
    """

    type: Optional[Any] = Field(
        default=None, description="Input kind: code, package or url", examples=["url"]
    )
    content: Optional[Any] = Field(
        default=None, description="Code snippet, package name/manifest, or URL",
        examples=["bit.ly/xyz"],
    )


class AnalyzeResponse(BaseModel):
    """Successful analysis."""
    error: Literal[False] = False
    type: str
    result: RiskVerdict


class ErrorResponse(BaseModel):
    """Failed analysis."""
    error: Literal[True] = True
    message: str
