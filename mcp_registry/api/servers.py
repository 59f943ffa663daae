from __future__ import annotations

from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from mcp_registry.api.payloads import (
    server_list_payload,
    server_payload,
    server_versions_payload,
)
from mcp_registry.api.responses import error_payload
from mcp_registry.core.dependencies import get_repository
from mcp_registry.domain.entities import Registry
from mcp_registry.domain.errors import ServerNotFoundError
from mcp_registry.domain.models import ServerSearchRequest

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found(exc: ServerNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=error_payload("Server not found", str(exc)))


# ---------------------------------------------------------------------------
# 1. GET /servers
# ---------------------------------------------------------------------------

@router.get("/servers")
async def list_servers(
    search: Optional[str] = Query(None, description="Case-insensitive text search"),
    limit: Optional[str] = Query(None, description="Page size (default 30, max 100)"),
    updated_since: Optional[str] = Query(None, description="Only entries updated after this timestamp"),
    version: Optional[str] = Query(None, description="Exact version, or 'latest'"),
    repo: Registry = Depends(get_repository),
) -> dict:
    """
    List servers with optional search/filter, truncated to `limit`.
    """
    request = ServerSearchRequest(
        search=search,
        limit=limit,
        updated_since=updated_since,
        version=version,
    )
    result = repo.search_servers(request)
    return server_list_payload(result)


# ---------------------------------------------------------------------------
# 2. GET /servers/{serverName}/versions
# ---------------------------------------------------------------------------

@router.get("/servers/{server_name:path}/versions")
async def list_server_versions(
    server_name: str,
    repo: Registry = Depends(get_repository),
) -> dict:
    """
    Every stored version of a server, unpaginated.
    """
    try:
        versions = repo.list_versions(server_name, decode=False)
    except ServerNotFoundError as e:
        raise _not_found(e)
    return server_versions_payload(versions)


# ---------------------------------------------------------------------------
# 3. GET /servers/{serverName}/versions/latest
# ---------------------------------------------------------------------------

@router.get("/servers/{server_name:path}/versions/latest")
async def get_latest_server_version(
    server_name: str,
    repo: Registry = Depends(get_repository),
) -> dict:
    try:
        entry = repo.get_latest(server_name, decode=False)
    except ServerNotFoundError as e:
        raise _not_found(e)
    return server_payload(entry)


# ---------------------------------------------------------------------------
# 4. GET /servers/{serverName}/versions/{version}
# ---------------------------------------------------------------------------

@router.get("/servers/{server_name:path}/versions/{version}")
async def get_server_version(
    server_name: str,
    version: str,
    repo: Registry = Depends(get_repository),
) -> dict:
    """
    A specific version of a server. `latest` is served by the latest lookup.
    """
    try:
        entry = repo.get_version(server_name, version, decode=False)
    except ServerNotFoundError as e:
        raise _not_found(e)
    return server_payload(entry)
