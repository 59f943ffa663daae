from typing import Callable, List, Optional, Sequence
import logging
from urllib.parse import unquote

from mcp_registry.storage.db_manager import DatasetManager
from mcp_registry.domain.errors import ServerNotFoundError
from mcp_registry.domain.models import (
    RegistryConfig,
    ServerDetail,
    ServerResponse,
    ServerSearchRequest,
    ServerSearchResult,
)
from mcp_registry.domain.registry_utils import dash_encode, match_text, parse_timestamp

logger = logging.getLogger(__name__)

LATEST = "latest"


class Registry:
    """
    Read-only view over the loaded dataset: name resolution, version lookup
    and the list/search pipeline.
    """

    def __init__(self, db: DatasetManager, config: Optional[RegistryConfig] = None):
        self.db = db
        self.config = config or RegistryConfig()

    @property
    def servers(self) -> Sequence[ServerResponse]:
        return self.db.get_servers()

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------

    def resolve_name(self, token: str, decode: bool = True) -> str:
        """
        Map a name token from a URL path segment to a canonical server name.

        Tokens may be percent-encoded, or use the dash fallback where `/` and
        `.` were both replaced by `-`. Matching is ranked exact, then
        `/<token>` suffix, then substring; within a rank the first entry in
        load order wins.

        Pass `decode=False` for tokens the web framework has already
        percent-decoded, so a literal `%` in a name survives.
        """
        raw = unquote(token) if decode else token
        if not raw:
            raise ServerNotFoundError("No server found with an empty name")

        resolved = raw
        if "/" not in raw and "-" in raw:
            for entry in self.servers:
                if dash_encode(entry.name) == raw:
                    resolved = entry.name
                    break

        ranks: List[Callable[[str], bool]] = [
            lambda name: name == resolved,
            lambda name: name.endswith("/" + raw),
            lambda name: raw in name,
        ]
        for matches in ranks:
            for entry in self.servers:
                if matches(entry.name):
                    return entry.name

        raise ServerNotFoundError(f"No server found with name: {raw}")

    def list_versions(self, token: str, decode: bool = True) -> List[ServerResponse]:
        """All entries sharing the resolved name, in load order."""
        name = self.resolve_name(token, decode=decode)
        return [entry for entry in self.servers if entry.name == name]

    def get_latest(self, token: str, decode: bool = True) -> ServerResponse:
        versions = self.list_versions(token, decode=decode)
        for entry in versions:
            if entry.is_latest:
                return entry
        # No version flagged; serve the first one rather than failing.
        logger.debug("No latest flag for %s, falling back to first entry", versions[0].name)
        return versions[0]

    def get_version(self, token: str, version: str, decode: bool = True) -> ServerResponse:
        if decode:
            token, version = unquote(token), unquote(version)
        wanted = version
        if wanted == LATEST:
            return self.get_latest(token, decode=False)

        for entry in self.list_versions(token, decode=False):
            if entry.version == wanted:
                return entry

        raise ServerNotFoundError(
            f"No server found with name: {token} and version: {wanted}"
        )

    # ------------------------------------------------------------------
    # List / search
    # ------------------------------------------------------------------

    def effective_limit(self, requested: Optional[int]) -> int:
        if requested is None:
            requested = self.config.default_limit
        return max(0, min(requested, self.config.max_limit))

    def search_servers(self, request: ServerSearchRequest) -> ServerSearchResult:
        """
        Run the list pipeline: search, updated_since, version, then truncate.
        No sort is applied; results keep load order.
        """
        servers = list(self.servers)

        # Step 1: free-text search
        if request.search:
            servers = [s for s in servers if self._matches_search(s.server, request.search)]

        # Step 2: updated_since
        if request.updated_since:
            since = parse_timestamp(request.updated_since)
            servers = [s for s in servers if self._updated_after(s, since)]

        # Step 3: version
        if request.version == LATEST:
            servers = [s for s in servers if s.is_latest]
        elif request.version:
            servers = [s for s in servers if s.version == request.version]

        # Step 4: truncate
        limit = self.effective_limit(request.limit)
        next_cursor = servers[limit].name if len(servers) > limit else None

        return ServerSearchResult(
            servers=servers[:limit],
            total=len(servers),
            limit=limit,
            next_cursor=next_cursor,
        )

    def _matches_search(self, server: ServerDetail, keyword: str) -> bool:
        candidates = [
            server.name,
            server.description,
            server.title,
            *(server.tags or []),
        ]
        for value in candidates:
            if match_text(value, keyword):
                return True
        return False

    def _updated_after(self, entry: ServerResponse, since) -> bool:
        if since is None:
            return False
        updated = parse_timestamp(entry.official.updated_at)
        if updated is None:
            return False
        return updated > since
