"""
Data models for ThreatLens.
"""

from .verdict import Finding, RiskVerdict, RiskLevel, RISK_LEVELS

__all__ = [
    "Finding",
    "RiskVerdict",
    "RiskLevel",
    "RISK_LEVELS",
]
