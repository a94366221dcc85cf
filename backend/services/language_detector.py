"""
Regex-signature language detection for submitted code snippets.
"""

import re
from typing import List, Tuple

UNKNOWN_LANGUAGE = "Unknown"

# Ordered by priority: the first matching signature wins. Patterns overlap
# (PHP's function pattern matches plenty of JavaScript), so order matters.
LANGUAGE_SIGNATURES: List[Tuple[re.Pattern, str]] = [
    (
        re.compile(
            r"\bimport\s+.*\s+from\s+['\"]|require\s*\(|module\.exports|const\s+\w+\s*=\s*require"
        ),
        "JavaScript/Node.js",
    ),
    (
        re.compile(r"\bdef\s+\w+\s*\(|import\s+\w+|from\s+\w+\s+import|print\s*\("),
        "Python",
    ),
    (re.compile(r"<\?php|namespace\s+\w+|function\s+\w+\s*\(.*\)\s*\{"), "PHP"),
    (re.compile(r"\bpackage\s+\w+|func\s+\w+\s*\(|import\s+\""), "Go"),
    (re.compile(r"\bpublic\s+(static\s+)?class\s+|System\.out\.print"), "Java"),
    (re.compile(r"\busing\s+System|namespace\s+\w+\s*\{|Console\.Write"), "C#"),
    (re.compile(r"#include\s*<|int\s+main\s*\(|printf\s*\(|std::"), "C/C++"),
    (
        re.compile(r"<script|</div>|document\.getElementById|addEventListener"),
        "HTML/JavaScript",
    ),
    (re.compile(r"\$\w+\s*=|#!"), "Shell/Bash"),
    (
        re.compile(r"powershell|Get-ChildItem|Set-ExecutionPolicy|Invoke-WebRequest"),
        "PowerShell",
    ),
]


def detect_language(code: str) -> str:
    """
    Classify a code snippet by the first matching signature.

    Args:
        code: Source text (already truncated by the caller)

    Returns:
        Language label, or "Unknown" when nothing matches
    """
    for pattern, label in LANGUAGE_SIGNATURES:
        if pattern.search(code):
            return label
    return UNKNOWN_LANGUAGE
