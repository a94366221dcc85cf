"""
Structural URL analysis and homograph detection.

Everything here is pure and deterministic: no network access.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

# Non-Latin characters that render like Latin letters
HOMOGRAPH_MAP: Dict[str, str] = {
    "а": "a",  # Cyrillic a
    "с": "c",
    "е": "e",
    "о": "o",
    "р": "p",
    "х": "x",
    "у": "y",
    "А": "A",
    "В": "B",
    "С": "C",
    "Е": "E",
    "Н": "H",
    "К": "K",
    "М": "M",
    "О": "O",
    "Р": "P",
    "Т": "T",
    "Х": "X",
    "і": "i",  # Ukrainian i
    "ј": "j",
    "ё": "ë",
    "ѕ": "s",
    "ԁ": "d",  # Komi de
    "ɡ": "g",  # IPA script g
    "ʜ": "h",  # small capital H
}

SUSPICIOUS_TLDS = (
    ".tk", ".ml", ".ga", ".cf", ".gq", ".xyz", ".top",
    ".buzz", ".club", ".work", ".click", ".link", ".info",
)

URL_SHORTENERS = (
    "bit.ly", "tinyurl.com", "t.co", "goo.gl", "ow.ly",
    "is.gd", "v.gd", "buff.ly", "rebrand.ly", "short.io",
)

BRAND_TARGETS = (
    "google", "microsoft", "apple", "amazon", "paypal", "facebook",
    "instagram", "github", "netflix", "linkedin", "twitter", "bank",
    "login", "verify", "secure", "account", "update", "confirm",
)

# Four dot-separated digit groups; octet ranges are not validated
IPV4_PATTERN = re.compile(r"[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}")

DEFAULT_PORTS = {"https": "443", "http": "80"}


class InvalidURLError(ValueError):
    """Raised when a URL string cannot be parsed into a host."""


@dataclass(frozen=True)
class HomographFinding:
    """A lookalike character found in a hostname."""

    character: str
    lookalike_ascii: str
    codepoint: str


@dataclass(frozen=True)
class URLFeatures:
    """Structural features derived from a single URL string."""

    full_url: str
    protocol: str
    hostname: str
    port: str
    path: str
    query_params: str
    hash: str
    tld: str
    subdomain_count: int
    subdomains: str
    is_suspicious_tld: bool
    is_ip_address: bool
    is_shortener: bool
    brand_targets: List[str] = field(default_factory=list)


def normalize_url(url: str) -> str:
    """Prepend http:// when the input has no http(s) scheme."""
    if not url.startswith("http://") and not url.startswith("https://"):
        return "http://" + url
    return url


def analyze_url_structure(url: str) -> URLFeatures:
    """
    Parse a URL and compute its structural risk features.

    Args:
        url: URL as submitted (scheme optional)

    Returns:
        URLFeatures for the normalized URL

    Raises:
        InvalidURLError: If the URL has no parseable host
    """
    normalized = normalize_url(url)
    try:
        parsed = urlsplit(normalized)
        explicit_port: Optional[int] = parsed.port
    except ValueError as e:
        raise InvalidURLError(f'Invalid URL: "{normalized}"') from e

    hostname = parsed.hostname or ""
    if not hostname or any(ch.isspace() for ch in hostname):
        raise InvalidURLError(f'Invalid URL: "{normalized}"')

    scheme = parsed.scheme.lower()
    path = parsed.path or "/"
    parts = hostname.split(".")
    tld = "." + parts[-1]
    lowered_host = hostname.lower()
    lowered_path = path.lower()

    return URLFeatures(
        full_url=urlunsplit((scheme, parsed.netloc, path, parsed.query, parsed.fragment)),
        protocol=f"{scheme}:",
        hostname=hostname,
        port=str(explicit_port) if explicit_port is not None else DEFAULT_PORTS.get(scheme, ""),
        path=path,
        query_params=f"?{parsed.query}" if parsed.query else "",
        hash=f"#{parsed.fragment}" if parsed.fragment else "",
        tld=tld,
        subdomain_count=max(len(parts) - 2, 0),
        subdomains=".".join(parts[:-2]),
        is_suspicious_tld=tld.lower() in SUSPICIOUS_TLDS,
        is_ip_address=bool(IPV4_PATTERN.fullmatch(hostname)),
        is_shortener=any(shortener in lowered_host for shortener in URL_SHORTENERS),
        brand_targets=[
            brand for brand in BRAND_TARGETS if brand in lowered_host or brand in lowered_path
        ],
    )


def unicode_hostname(hostname: str) -> str:
    """Decode punycode (xn--) labels so lookalike characters become visible."""
    labels = []
    for label in hostname.split("."):
        if label.lower().startswith("xn--"):
            try:
                label = label.encode("ascii").decode("idna")
            except (UnicodeError, ValueError):
                pass
        labels.append(label)
    return ".".join(labels)


def detect_homographs(domain: str) -> List[HomographFinding]:
    """Return one finding per lookalike character, in hostname order."""
    return [
        HomographFinding(
            character=char,
            lookalike_ascii=HOMOGRAPH_MAP[char],
            codepoint=f"U+{ord(char):04X}",
        )
        for char in domain
        if char in HOMOGRAPH_MAP
    ]
