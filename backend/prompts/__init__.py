"""
System prompts for the three analyst roles.
"""

from .code_analyst import CODE_ANALYST_PROMPT
from .package_analyst import PACKAGE_ANALYST_PROMPT
from .url_analyst import URL_ANALYST_PROMPT

__all__ = [
    "CODE_ANALYST_PROMPT",
    "PACKAGE_ANALYST_PROMPT",
    "URL_ANALYST_PROMPT",
]
