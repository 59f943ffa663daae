from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mcp_registry.core.dependencies import get_registry_config, get_repository
from mcp_registry.domain.entities import Registry
from mcp_registry.domain.models import OFFICIAL_META_KEY, RegistryConfig
from mcp_registry.main import app
from mcp_registry.storage.json_db_manager import JsonDatasetManager


def make_entry(
    name: str,
    version: str,
    *,
    is_latest: bool = False,
    description: str = "",
    updated_at: str = "2025-01-01T00:00:00Z",
    **server_fields,
) -> dict:
    """Canonical `{server, _meta}` record with one npm package."""
    server = {
        "name": name,
        "description": description or f"{name} server",
        "version": version,
        "packages": [
            {
                "registryType": "npm",
                "identifier": name.split("/")[-1],
                "version": version,
                "transport": {"type": "stdio"},
            }
        ],
    }
    server.update(server_fields)
    return {
        "server": server,
        "_meta": {
            OFFICIAL_META_KEY: {
                "status": "active",
                "publishedAt": updated_at,
                "updatedAt": updated_at,
                "isLatest": is_latest,
            }
        },
    }


def write_dataset(directory: Path, records, wrap: bool = True) -> Path:
    path = directory / "servers.json"
    data = {"servers": records} if wrap else records
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def build_registry(path: Path, config: RegistryConfig = None) -> Registry:
    db = JsonDatasetManager(path)
    db.initialize()
    return Registry(db, config or RegistryConfig(data_file=path))


@pytest.fixture
def records():
    return [
        make_entry(
            "io.github.acme/foo-tool",
            "1.0.0",
            is_latest=True,
            description="Foo tool for widget automation",
            updated_at="2025-03-01T00:00:00Z",
            title="Foo Tool",
        ),
        make_entry(
            "io.github.acme/foo-tool",
            "0.9.0",
            description="Foo tool for widget automation",
            updated_at="2024-11-15T00:00:00Z",
            title="Foo Tool",
        ),
        make_entry(
            "io.github.other/bar-server",
            "2.0.0",
            is_latest=True,
            description="Bar server with GitHub integration",
            updated_at="2025-06-10T12:00:00Z",
            tags=["vcs", "issues"],
        ),
        make_entry(
            "com.example/foo-tool-extras",
            "0.1.0",
            is_latest=True,
            description="Extra helpers",
            updated_at="not a timestamp",
        ),
    ]


@pytest.fixture
def dataset_path(tmp_path, records) -> Path:
    return write_dataset(tmp_path, records)


@pytest.fixture
def registry(dataset_path) -> Registry:
    return build_registry(dataset_path)


@pytest.fixture
def client(registry):
    app.dependency_overrides[get_repository] = lambda: registry
    app.dependency_overrides[get_registry_config] = lambda: registry.config
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
