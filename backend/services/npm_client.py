"""
NPM Registry API client.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from env import NPM_REGISTRY_URL


class RegistryLookupStatus(Enum):
    """Outcome of a registry lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class RegistryMetadata:
    """Security-relevant view of a registry document."""

    latest_version: Optional[str]
    author: str
    maintainers: str
    created: Optional[str]
    modified: Optional[str]
    version_count: int
    license: Optional[str]
    description: Optional[str]
    scripts: Dict[str, str] = field(default_factory=dict)
    dependencies: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RegistryLookup:
    """
    Tagged result of a registry fetch.

    Callers branch on ``status``; the client never raises for lookup failures.
    """

    package_name: str
    status: RegistryLookupStatus
    metadata: Optional[RegistryMetadata] = None
    message: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is RegistryLookupStatus.FOUND


def format_author(author: Any) -> str:
    """Normalize the registry author field to a display string."""
    if not author:
        return "No author listed"
    if isinstance(author, str):
        return author
    if isinstance(author, dict):
        name = author.get("name") or "Unknown"
        email = author.get("email") or "no email"
        return f"{name} <{email}>"
    return str(author)


def format_maintainers(maintainers: Any) -> str:
    """Comma-join maintainer names, tolerating string entries."""
    if not isinstance(maintainers, list):
        return "None listed"
    names = []
    for maintainer in maintainers:
        if isinstance(maintainer, dict):
            name = maintainer.get("name")
        else:
            name = maintainer
        if name:
            names.append(str(name))
    return ", ".join(names) or "None listed"


def parse_registry_document(data: dict) -> RegistryMetadata:
    """Distill a raw registry response into RegistryMetadata."""
    dist_tags = data.get("dist-tags") or {}
    latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    if not isinstance(latest, str):
        latest = None

    versions = data.get("versions") or {}
    if not isinstance(versions, dict):
        versions = {}
    latest_data = versions.get(latest) if latest else None
    if not isinstance(latest_data, dict):
        latest_data = {}

    time_data = data.get("time") or {}
    if not isinstance(time_data, dict):
        time_data = {}

    scripts = latest_data.get("scripts") or {}
    dependencies = latest_data.get("dependencies") or {}

    return RegistryMetadata(
        latest_version=latest,
        author=format_author(data.get("author")),
        maintainers=format_maintainers(data.get("maintainers")),
        created=time_data.get("created"),
        modified=time_data.get("modified"),
        version_count=len(versions),
        license=data.get("license") if isinstance(data.get("license"), str) else None,
        description=data.get("description"),
        scripts={str(k): str(v) for k, v in scripts.items()} if isinstance(scripts, dict) else {},
        dependencies=dependencies if isinstance(dependencies, dict) else {},
    )


class NpmRegistryClient:
    """
    Client for the npm registry API (singleton).

    One shared requests.Session is reused for connection pooling; blocking
    calls run in a worker thread so the event loop stays free.
    """

    TIMEOUT = 30

    _instance: Optional["NpmRegistryClient"] = None

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the npm client (only runs once due to singleton)."""
        if not hasattr(self, "_initialized"):
            self.base_url = NPM_REGISTRY_URL.rstrip("/")
            self._session = requests.Session()
            self._session.headers.update(
                {"Accept": "application/json", "User-Agent": "ThreatLens/1.0"}
            )
            self._initialized = True

    async def lookup_package(self, package_name: str) -> RegistryLookup:
        """
        Fetch and distill package metadata.

        Args:
            package_name: npm package name (scoped names are URL-encoded)

        Returns:
            RegistryLookup tagged FOUND, NOT_FOUND or ERROR
        """
        return await asyncio.to_thread(self._lookup_package_sync, package_name)

    def _lookup_package_sync(self, package_name: str) -> RegistryLookup:
        """Synchronous implementation of lookup_package."""
        url = f"{self.base_url}/{quote(package_name, safe='')}"

        try:
            response = self._session.get(url, timeout=self.TIMEOUT)
            if response.status_code == 404:
                print(f"[npm_client] Package not found: {package_name}")
                return RegistryLookup(
                    package_name=package_name,
                    status=RegistryLookupStatus.NOT_FOUND,
                    message=f'Package "{package_name}" not found in npm registry.',
                )
            if response.status_code != 200:
                print(
                    f"[npm_client] WARNING: Registry returned HTTP "
                    f"{response.status_code} for {package_name}"
                )
                return RegistryLookup(
                    package_name=package_name,
                    status=RegistryLookupStatus.ERROR,
                    message=f"NPM Registry returned HTTP {response.status_code}",
                )
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError("registry response is not a JSON object")
            return RegistryLookup(
                package_name=package_name,
                status=RegistryLookupStatus.FOUND,
                metadata=parse_registry_document(data),
            )
        except (requests.RequestException, ValueError) as e:
            print(f"[npm_client] ERROR: Failed to fetch package {package_name}: {e}")
            return RegistryLookup(
                package_name=package_name,
                status=RegistryLookupStatus.ERROR,
                message=f"Failed to fetch from npm registry: {e}",
            )


def get_npm_client() -> NpmRegistryClient:
    """Return the shared registry client."""
    return NpmRegistryClient()
