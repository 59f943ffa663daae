from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp_registry.domain.models import OFFICIAL_META_KEY, ServerResponse
from mcp_registry.domain.registry_utils import strip_nulls


# Keys that only appear in the legacy flat shape. Anything else is carried
# over into the server record untouched.
_LEGACY_KEYS = {
    "id",
    "name",
    "description",
    "version",
    "packages",
    "status",
    "updated_at",
    "published_at",
    "isLatest",
}


def is_legacy_record(raw: Dict[str, Any]) -> bool:
    """
    Canonical records wrap the entry under `server`; everything else is
    treated as the legacy flat shape.
    """
    return "server" not in raw


def _package_from_legacy(raw: Dict[str, Any]) -> Dict[str, Any]:
    package: Dict[str, Any] = {
        "registryType": raw.get("registryType") or raw.get("registry_type") or raw.get("type") or "npm",
        "identifier": raw.get("identifier") or raw.get("name") or "",
    }
    if raw.get("version"):
        package["version"] = raw["version"]
    if raw.get("transport"):
        package["transport"] = raw["transport"]
    return package


def from_legacy_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate one legacy flat record to the canonical envelope shape.

    Legacy records key the namespaced name under `id` and use `name` as a
    display title. The first package URL, if any, becomes the repository URL.
    """
    canonical_name = raw.get("id") or raw.get("name") or ""
    server: Dict[str, Any] = {
        "name": canonical_name,
        "description": raw.get("description") or "",
        "version": raw.get("version") or "",
    }

    title = raw.get("name")
    if raw.get("id") and title and title != canonical_name:
        server["title"] = title

    legacy_packages: List[Dict[str, Any]] = raw.get("packages") or []
    if legacy_packages:
        server["packages"] = [_package_from_legacy(p) for p in legacy_packages]
        url = legacy_packages[0].get("url")
        if url:
            server["repository"] = {"url": url, "source": "github"}

    for key, value in raw.items():
        if key not in _LEGACY_KEYS and key not in server:
            server[key] = value

    updated_at = raw.get("updated_at")
    meta = {
        "status": raw.get("status") or "active",
        "publishedAt": raw.get("published_at") or updated_at,
        "updatedAt": updated_at,
        "isLatest": bool(raw.get("isLatest", False)),
    }

    return {
        "server": server,
        "_meta": {OFFICIAL_META_KEY: strip_nulls(meta)},
    }


def _repository_url(entry: ServerResponse) -> Optional[str]:
    repository = (entry.server.model_extra or {}).get("repository")
    if isinstance(repository, dict):
        return repository.get("url")
    return None


def to_legacy_record(entry: ServerResponse) -> Dict[str, Any]:
    """
    Flatten a canonical entry into the legacy shape written to `registry.json`.
    """
    server = entry.server
    official = entry.official

    packages: List[Dict[str, Any]] = []
    for index, package in enumerate(server.packages or []):
        flat: Dict[str, Any] = {
            "registry_type": package.registry_type,
            "identifier": package.identifier,
        }
        if package.version:
            flat["version"] = package.version
        url = _repository_url(entry) if index == 0 else None
        if url is None and package.transport is not None:
            url = package.transport.url
        if url:
            flat["url"] = url
        packages.append(flat)

    record: Dict[str, Any] = {
        "id": server.name,
        "name": server.title or server.name,
        "description": server.description,
        "version": server.version,
        "packages": packages,
        "status": official.status,
        "published_at": official.published_at,
        "updated_at": official.updated_at,
        "isLatest": official.is_latest,
    }
    if server.tags:
        record["tags"] = list(server.tags)
    if server.remotes:
        record["remotes"] = [r.model_dump(mode="json", exclude_none=True) for r in server.remotes]
    return strip_nulls(record)
