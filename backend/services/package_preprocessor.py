"""
Package preprocessor.

Accepts a bare package name or a pasted package.json, pulls registry
metadata and highlights lifecycle scripts worth a closer look.
"""

import json
from typing import Any, Dict, Optional, Tuple

from services.npm_client import NpmRegistryClient, RegistryMetadata, get_npm_client

SENSITIVE_SCRIPT_KEYS = frozenset(
    {"preinstall", "postinstall", "preuninstall", "postuninstall", "prepare", "prepublish"}
)

# Case-sensitive substrings that flag a script regardless of its hook name
SUSPICIOUS_SCRIPT_MARKERS = ("curl", "wget", "eval", "base64")

PACKAGE_CLOSING_INSTRUCTION = (
    "Analyze this package for supply chain security risks, typosquatting, "
    "malicious scripts, and suspicious behavior."
)


def parse_package_input(package_input: str) -> Tuple[str, Optional[Dict[str, Any]]]:
    """
    Resolve the package name and optional manifest from user input.

    Returns:
        (package_name, manifest) where manifest is None for bare names
    """
    trimmed = package_input.strip()
    if trimmed.startswith("{"):
        try:
            manifest = json.loads(trimmed)
        except (ValueError, RecursionError):
            return trimmed, None
        if isinstance(manifest, dict):
            return str(manifest.get("name") or "unknown"), manifest
    return trimmed, None


def select_security_critical_scripts(scripts: Dict[str, str]) -> Dict[str, str]:
    """Pick lifecycle hooks and scripts that shell out to downloaders or decoders."""
    return {
        key: value
        for key, value in scripts.items()
        if key in SENSITIVE_SCRIPT_KEYS
        or any(marker in value for marker in SUSPICIOUS_SCRIPT_MARKERS)
    }


def _json_block(value: Any) -> str:
    return f"```json\n{json.dumps(value, indent=2, ensure_ascii=False)}\n```"


def _metadata_section(metadata: RegistryMetadata) -> str:
    return "\n".join(
        [
            "### Registry Metadata",
            f"- **Latest Version:** {metadata.latest_version or 'N/A'}",
            f"- **Author:** {metadata.author}",
            f"- **Maintainers:** {metadata.maintainers}",
            f"- **Created:** {metadata.created or 'N/A'}",
            f"- **Last Modified:** {metadata.modified or 'N/A'}",
            f"- **Total Versions:** {metadata.version_count}",
            f"- **License:** {metadata.license or 'None specified'}",
            f"- **Description:** {metadata.description or 'No description'}",
        ]
    )


async def preprocess_package(
    package_input: str, client: Optional[NpmRegistryClient] = None
) -> str:
    """
    Build the package analysis request sent to the model.

    Args:
        package_input: Package name or package.json text
        client: Registry client override (defaults to the shared client)

    Returns:
        Markdown context with registry facts, scripts and dependencies
    """
    package_name, manifest = parse_package_input(package_input)
    client = client or get_npm_client()
    lookup = await client.lookup_package(package_name)

    sections = [f"## Package Analysis Request\n\n**Package Name:** {package_name}"]

    if lookup.found and lookup.metadata is not None:
        metadata = lookup.metadata
        sections.append(_metadata_section(metadata))

        if metadata.scripts:
            critical = select_security_critical_scripts(metadata.scripts)
            if critical:
                sections.append(
                    "### ⚠️ Install/Lifecycle Scripts (Security-Critical)\n"
                    + _json_block(critical)
                )
            sections.append("### All Scripts\n" + _json_block(metadata.scripts))

        if metadata.dependencies:
            sections.append("### Dependencies\n" + _json_block(metadata.dependencies))
    else:
        sections.append(f"### Registry Lookup\n⚠️ {lookup.message}")

    if manifest is not None:
        sections.append("### User-Provided package.json\n" + _json_block(manifest))

    sections.append(f"\n{PACKAGE_CLOSING_INSTRUCTION}")
    return "\n\n".join(sections)
