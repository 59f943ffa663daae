import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from mcp_registry.data.legacy import from_legacy_record, is_legacy_record
from mcp_registry.domain.errors import DatasetLoadError
from mcp_registry.domain.models import ServerResponse
from mcp_registry.storage.db_manager import DatasetManager

logger = logging.getLogger(__name__)


class JsonDatasetManager(DatasetManager):
    def __init__(self, data_file: Path):
        self._data_file = data_file
        self._servers: Optional[Tuple[ServerResponse, ...]] = None

    @property
    def data_file(self) -> Path:
        return self._data_file

    def initialize(self) -> None:
        self._servers = self._load_servers()

    def get_servers(self) -> Tuple[ServerResponse, ...]:
        if self._servers is None:
            self.initialize()
        return self._servers

    def _read_records(self) -> List[Dict[str, Any]]:
        path = self._data_file
        if not path.is_file():
            raise DatasetLoadError(f"Dataset file not found: {path}")

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DatasetLoadError(f"Could not read dataset file {path}: {e}") from e

        # Accept either a bare array or the `{"servers": [...]}` wrapper.
        if isinstance(raw, dict) and isinstance(raw.get("servers"), list):
            records = raw["servers"]
        elif isinstance(raw, list):
            records = raw
        else:
            raise DatasetLoadError(
                f"Dataset file {path} must be a JSON array or an object with a 'servers' array"
            )

        for position, record in enumerate(records):
            if not isinstance(record, dict):
                raise DatasetLoadError(f"Dataset entry #{position} in {path} is not an object")
        return records

    def _load_servers(self) -> Tuple[ServerResponse, ...]:
        records = self._read_records()

        servers: List[ServerResponse] = []
        migrated = 0
        for position, raw in enumerate(records):
            # Migration: accept the legacy flat record shape
            if is_legacy_record(raw):
                raw = from_legacy_record(raw)
                migrated += 1
            try:
                servers.append(ServerResponse.model_validate(raw))
            except ValidationError as e:
                raise DatasetLoadError(
                    f"Dataset entry #{position} in {self._data_file} is invalid: {e}"
                ) from e

        latest_counts = Counter(s.name for s in servers if s.is_latest)
        for name, count in latest_counts.items():
            if count > 1:
                logger.warning("Server %s has %d versions flagged as latest", name, count)

        if migrated:
            logger.info("Migrated %d legacy flat records from %s", migrated, self._data_file)
        logger.info("Loaded %d server entries from %s", len(servers), self._data_file)
        return tuple(servers)
