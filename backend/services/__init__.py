"""
Services layer for ThreatLens.
"""

from .language_detector import detect_language
from .npm_client import (
    NpmRegistryClient,
    RegistryLookup,
    RegistryLookupStatus,
    RegistryMetadata,
    get_npm_client,
)
from .url_analyzer import URLFeatures, HomographFinding, analyze_url_structure, detect_homographs
from .network_probe import DnsRecords, RedirectProbe, lookup_dns, probe_redirect
from .code_preprocessor import preprocess_code
from .package_preprocessor import preprocess_package
from .url_preprocessor import preprocess_url
from .model_gateway import ModelGateway, ModelConfigurationError, get_model_gateway, normalize_verdict

__all__ = [
    "detect_language",
    "NpmRegistryClient",
    "RegistryLookup",
    "RegistryLookupStatus",
    "RegistryMetadata",
    "get_npm_client",
    "URLFeatures",
    "HomographFinding",
    "analyze_url_structure",
    "detect_homographs",
    "DnsRecords",
    "RedirectProbe",
    "lookup_dns",
    "probe_redirect",
    "preprocess_code",
    "preprocess_package",
    "preprocess_url",
    "ModelGateway",
    "ModelConfigurationError",
    "get_model_gateway",
    "normalize_verdict",
]
