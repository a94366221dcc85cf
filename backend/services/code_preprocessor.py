"""
Code preprocessor.

Truncates a submitted snippet, detects its language and numbers every line
so the model can cite exact locations in its findings.
"""

from services.language_detector import detect_language

MAX_CODE_CHARS = 30000

CODE_CLOSING_INSTRUCTION = (
    "Analyze this code for malicious intent, backdoors, obfuscation, "
    "and security vulnerabilities."
)


def truncate_code(raw_code: str, max_chars: int = MAX_CODE_CHARS) -> str:
    """Cut code to the character budget, appending a visible marker when cut."""
    if len(raw_code) <= max_chars:
        return raw_code
    return (
        raw_code[:max_chars]
        + f"\n\n[... TRUNCATED: original code exceeds {max_chars} characters ...]"
    )


def add_line_numbers(code: str) -> str:
    """Prefix each line with a right-aligned 1-based line number and ' | '."""
    lines = code.split("\n")
    width = len(str(len(lines)))
    return "\n".join(
        f"{number:>{width}} | {line}" for number, line in enumerate(lines, start=1)
    )


async def preprocess_code(raw_code: str) -> str:
    """
    Build the code analysis request sent to the model.

    Args:
        raw_code: Code exactly as submitted

    Returns:
        Markdown context with language, size, numbered source and instruction
    """
    original_length = len(raw_code)
    truncated = truncate_code(raw_code)
    language = detect_language(truncated)
    numbered = add_line_numbers(truncated)

    note = ""
    if original_length > MAX_CODE_CHARS:
        note = (
            f"**Note:** Code was truncated from {original_length} "
            f"to {MAX_CODE_CHARS} characters.\n"
        )

    return (
        "## Code Analysis Request\n\n"
        f"**Detected Language:** {language}\n"
        f"**Total Characters:** {original_length}\n"
        f"{note}\n"
        "**Source Code:**\n"
        "```\n"
        f"{numbered}\n"
        "```\n\n"
        f"{CODE_CLOSING_INSTRUCTION}"
    )
