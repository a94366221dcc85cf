"""
URL preprocessor.

Combines structural analysis, homograph detection, DNS records and, for
known shorteners, the redirect destination into one analysis request.
Every network step degrades to an inline note; the structural and
homograph signals are always delivered.
"""

from services.network_probe import DnsRecords, RedirectProbe, lookup_dns, probe_redirect
from services.url_analyzer import (
    InvalidURLError,
    URLFeatures,
    analyze_url_structure,
    detect_homographs,
    normalize_url,
    unicode_hostname,
)

EXCESSIVE_SUBDOMAIN_THRESHOLD = 3

URL_CLOSING_INSTRUCTION = (
    "Analyze this URL for phishing attempts, homograph attacks, "
    "malware delivery, and deceptive intent."
)


def _flag(condition: bool, warning: str) -> str:
    return f" ⚠️ {warning}" if condition else ""


def _structure_section(features: URLFeatures) -> str:
    brands = (
        "⚠️ " + ", ".join(features.brand_targets) if features.brand_targets else "None"
    )
    return "\n".join(
        [
            "### URL Structure",
            f"- **Full URL:** {features.full_url}",
            f"- **Protocol:** {features.protocol}",
            f"- **Hostname:** {features.hostname}",
            f"- **Port:** {features.port}",
            f"- **Path:** {features.path}",
            f"- **Query Params:** {features.query_params or 'None'}",
            f"- **TLD:** {features.tld}"
            + _flag(features.is_suspicious_tld, "SUSPICIOUS TLD"),
            f"- **Subdomain Count:** {features.subdomain_count}"
            + _flag(
                features.subdomain_count > EXCESSIVE_SUBDOMAIN_THRESHOLD,
                "EXCESSIVE SUBDOMAINS",
            ),
            f"- **Subdomains:** {features.subdomains or 'None'}",
            f"- **Is IP Address:** {'⚠️ YES' if features.is_ip_address else 'No'}",
            f"- **Is URL Shortener:** {'⚠️ YES' if features.is_shortener else 'No'}",
            f"- **Brand Targets Detected:** {brands}",
        ]
    )


def _homograph_section(hostname: str) -> str:
    findings = detect_homographs(unicode_hostname(hostname))
    if not findings:
        return "### Homograph Check\n✅ No homograph characters detected."
    details = "\n".join(
        f'  - Character "{f.character}" ({f.codepoint}) looks like Latin "{f.lookalike_ascii}"'
        for f in findings
    )
    return f"### ⚠️ Homograph Characters Detected\n{details}"


def _dns_section(records: DnsRecords) -> str:
    lines = [
        "### DNS Records",
        f"- **A Records:** {', '.join(records.a_records) or 'None / Failed'}",
        f"- **MX Records:** {', '.join(records.mx_records) or 'None / Failed'}",
    ]
    if records.error:
        lines.append(f"- **Error:** {records.error}")
    return "\n".join(lines)


def _redirect_section(probe: RedirectProbe) -> str:
    if probe.redirects_to:
        return (
            "### Redirect Chain\n"
            f"- **Short URL redirects to:** {probe.redirects_to}\n"
            f"- **HTTP Status:** {probe.status_code}"
        )
    return f"### Redirect Chain\n- **Note:** {probe.error or 'No redirect detected'}"


async def preprocess_url(url_input: str) -> str:
    """
    Build the URL analysis request sent to the model.

    Args:
        url_input: URL as submitted (scheme optional)

    Returns:
        Markdown context; only the structure error when the URL is unparseable
    """
    trimmed = url_input.strip()
    sections = [f"## URL Analysis Request\n\n**Input URL:** `{trimmed}`"]

    try:
        features = analyze_url_structure(trimmed)
    except InvalidURLError as e:
        print(f"[url_preprocessor] WARNING: {e}")
        sections.append(f"### URL Structure\n⚠️ {e}")
        return "\n\n".join(sections)

    sections.append(_structure_section(features))
    sections.append(_homograph_section(features.hostname))
    sections.append(_dns_section(await lookup_dns(features.hostname)))

    if features.is_shortener:
        sections.append(_redirect_section(await probe_redirect(normalize_url(trimmed))))

    sections.append(f"\n{URL_CLOSING_INSTRUCTION}")
    return "\n\n".join(sections)
