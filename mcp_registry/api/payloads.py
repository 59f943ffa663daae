"""
JSON documents served by the registry.

Both the HTTP routes and the static exporter build their bodies here so a
file written by the exporter matches the live response for the same resource.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from mcp_registry.domain.models import (
    API_PREFIX,
    RegistryConfig,
    ServerResponse,
    ServerSearchResult,
)


def info_payload(config: RegistryConfig) -> Dict[str, Any]:
    servers = f"{API_PREFIX}/servers"
    return {
        "name": config.registry_name,
        "version": config.api_version,
        "endpoints": {
            "servers": servers,
            "serverVersions": f"{servers}/:serverName/versions",
            "latestVersion": f"{servers}/:serverName/versions/latest",
            "specificVersion": f"{servers}/:serverName/versions/:version",
        },
    }


def health_payload() -> Dict[str, Any]:
    return {"status": "ok"}


def server_payload(entry: ServerResponse) -> Dict[str, Any]:
    return entry.to_payload()


def server_list_payload(result: ServerSearchResult) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "count": result.total,
        "limit": result.limit,
    }
    if result.next_cursor is not None:
        metadata["nextCursor"] = result.next_cursor

    return {
        "servers": [server_payload(s) for s in result.servers],
        "metadata": metadata,
    }


def server_versions_payload(entries: Sequence[ServerResponse]) -> Dict[str, Any]:
    return {
        "servers": [server_payload(s) for s in entries],
        "metadata": {"count": len(entries)},
    }
