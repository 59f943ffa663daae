"""Tests for migrating between the legacy flat shape and the canonical envelope."""

from conftest import make_entry
from mcp_registry.data.legacy import from_legacy_record, is_legacy_record, to_legacy_record
from mcp_registry.domain.models import OFFICIAL_META_KEY, ServerResponse


def test_is_legacy_record():
    assert is_legacy_record({"id": "a/b", "version": "1.0.0"})
    assert not is_legacy_record(make_entry("a/b", "1.0.0"))


def test_from_legacy_record_builds_envelope():
    record = from_legacy_record(
        {
            "id": "io.github.acme/tool",
            "name": "Tool",
            "description": "A tool",
            "version": "1.2.3",
            "packages": [{"registry_type": "pypi", "identifier": "acme-tool", "url": "https://github.com/acme/tool"}],
            "status": "deprecated",
            "updated_at": "2025-01-02T03:04:05Z",
            "websiteUrl": "https://acme.example",
        }
    )

    assert record["server"] == {
        "name": "io.github.acme/tool",
        "description": "A tool",
        "version": "1.2.3",
        "title": "Tool",
        "packages": [{"registryType": "pypi", "identifier": "acme-tool"}],
        "repository": {"url": "https://github.com/acme/tool", "source": "github"},
        "websiteUrl": "https://acme.example",
    }
    assert record["_meta"][OFFICIAL_META_KEY] == {
        "status": "deprecated",
        "publishedAt": "2025-01-02T03:04:05Z",
        "updatedAt": "2025-01-02T03:04:05Z",
        "isLatest": False,
    }


def test_legacy_record_without_id_uses_name():
    record = from_legacy_record({"name": "a/b", "version": "1.0.0", "packages": [{"name": "b"}]})
    assert record["server"]["name"] == "a/b"
    assert "title" not in record["server"]


def test_exported_legacy_record_loads_back_to_the_same_entry():
    original = ServerResponse.model_validate(
        make_entry(
            "io.github.acme/tool",
            "2.0.0",
            is_latest=True,
            title="Tool",
            tags=["cli"],
            repository={"url": "https://github.com/acme/tool", "source": "github"},
        )
    )

    flat = to_legacy_record(original)
    assert flat["id"] == "io.github.acme/tool"
    assert flat["packages"][0]["url"] == "https://github.com/acme/tool"

    restored = ServerResponse.model_validate(from_legacy_record(flat))
    assert restored.name == original.name
    assert restored.version == original.version
    assert restored.server.title == original.server.title
    assert restored.server.tags == original.server.tags
    assert restored.is_latest is True
    assert restored.official.updated_at == original.official.updated_at
    assert restored.server.packages[0].identifier == original.server.packages[0].identifier


def test_missing_timestamps_are_omitted_in_both_directions():
    record = from_legacy_record({"id": "a/b", "version": "1.0.0", "packages": [{"name": "b"}]})
    assert record["_meta"][OFFICIAL_META_KEY] == {"status": "active", "isLatest": False}

    raw = make_entry("a/b", "1.0.0", remotes=[{"type": "sse", "url": "https://b.example/sse"}])
    raw["_meta"][OFFICIAL_META_KEY] = {"status": "active", "isLatest": False}
    flat = to_legacy_record(ServerResponse.model_validate(raw))
    assert "published_at" not in flat
    assert "updated_at" not in flat
    assert flat["remotes"] == [{"type": "sse", "url": "https://b.example/sse"}]
