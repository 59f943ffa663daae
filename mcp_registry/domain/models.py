"""
Pydantic models for the MCP registry.

This module defines all data models used throughout the application, including:
- Registry configuration and settings
- Server entries and their registry metadata envelope
- Query request/result models for the list endpoint

Entries are frozen once loaded; the dataset is read-only for the lifetime of
the process.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mcp_registry.domain.registry_utils import parse_int_prefix


# Namespaced key under which the registry's own metadata lives in `_meta`.
OFFICIAL_META_KEY = "io.modelcontextprotocol.registry/official"

API_VERSION = "v0.1"
API_PREFIX = f"/{API_VERSION}"


# ---------------------------------------------------------------------------
# Registry Configuration Models
# ---------------------------------------------------------------------------


class RegistryConfig(BaseModel):
    """
    Top-level configuration for the registry process.

    Built once from environment variables by
    `mcp_registry.core.dependencies.get_registry_config`.
    """

    registry_name: str = Field(
        default="MCP Registry Demo",
        description="Human-friendly name reported by the root endpoint.",
    )
    api_version: str = Field(
        default=API_VERSION,
        description="API contract version reported by the root endpoint.",
    )
    default_limit: int = Field(
        default=30,
        ge=0,
        description="Page size used when the list endpoint gets no usable limit.",
    )
    max_limit: int = Field(
        default=100,
        ge=0,
        description="Hard upper bound on the list endpoint page size.",
    )
    data_file: Optional[Path] = Field(
        default=None,
        description="Path to the JSON dataset loaded at startup.",
    )
    host: str = Field(default="0.0.0.0", description="Bind address for the HTTP server.")
    port: int = Field(default=3000, ge=0, le=65535, description="Bind port for the HTTP server.")
    log_level: str = Field(default="INFO", description="Root logging level.")


# ---------------------------------------------------------------------------
# Server Entry Models
# ---------------------------------------------------------------------------


class Transport(BaseModel):
    """How a client talks to a packaged server (stdio, streamable-http, ...)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    url: Optional[str] = None


class PackageDescriptor(BaseModel):
    """
    A single installable distribution of a server.

    `registryType` names the package ecosystem (npm, pypi, oci, ...) and
    `identifier` is the package name within it.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    registry_type: str = Field(alias="registryType")
    identifier: str
    version: Optional[str] = None
    transport: Optional[Transport] = None


class RemoteDescriptor(BaseModel):
    """A hosted endpoint for a server that needs no local install."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    url: str


class ServerDetail(BaseModel):
    """
    The canonical registry record for one version of a server.

    Unknown fields are preserved so they are echoed back unchanged.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    schema_url: Optional[str] = Field(default=None, alias="$schema")
    name: str
    description: str = ""
    version: str
    title: Optional[str] = None
    packages: Optional[List[PackageDescriptor]] = None
    remotes: Optional[List[RemoteDescriptor]] = None
    tags: Optional[List[str]] = None

    @model_validator(mode="after")
    def require_distribution(self) -> "ServerDetail":
        if not self.packages and not self.remotes:
            raise ValueError(
                f"Server {self.name!r} {self.version!r} must declare at least one package or remote"
            )
        return self


class OfficialMeta(BaseModel):
    """
    Registry-owned metadata attached to every entry.

    Timestamps are kept as the source strings; they are only parsed when the
    list endpoint filters on `updated_since`.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    status: str = "active"
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    is_latest: bool = Field(default=False, alias="isLatest")


class ResponseMeta(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    official: OfficialMeta = Field(default_factory=OfficialMeta, alias=OFFICIAL_META_KEY)


class ServerResponse(BaseModel):
    """
    The unit returned by the API: a server entry plus its `_meta` envelope.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    server: ServerDetail
    meta: ResponseMeta = Field(default_factory=ResponseMeta, alias="_meta")

    @property
    def name(self) -> str:
        return self.server.name

    @property
    def version(self) -> str:
        return self.server.version

    @property
    def official(self) -> OfficialMeta:
        return self.meta.official

    @property
    def is_latest(self) -> bool:
        return self.meta.official.is_latest

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using wire names, with null fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# API Request/Response Models
# ---------------------------------------------------------------------------


class ServerSearchRequest(BaseModel):
    """
    Query parameters accepted by `GET /v0.1/servers`.

    `limit` is coerced the way a query string is: the leading integer is used
    and anything non-numeric becomes None (meaning "use the default").
    """

    search: Optional[str] = None
    updated_since: Optional[str] = None
    version: Optional[str] = None
    limit: Optional[int] = None

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        return parse_int_prefix(str(value))


class ServerSearchResult(BaseModel):
    """
    Result of running the list pipeline.

    `total` counts matches before truncation. `next_cursor` is the name of the
    first entry cut off by the limit; it is a hint, not a resumable offset.
    """

    servers: List[ServerResponse] = Field(default_factory=list)
    total: int = 0
    limit: int = 0
    next_cursor: Optional[str] = None
