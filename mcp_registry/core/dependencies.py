from pathlib import Path
from typing import Optional
import os

from mcp_registry.storage.db_manager import DatasetManager
from mcp_registry.storage.json_db_manager import JsonDatasetManager
from mcp_registry.domain.entities import Registry
from mcp_registry.domain.models import RegistryConfig

DATA_FILE_ENV_VAR = "MCP_REGISTRY_DATA_FILE"
HOST_ENV_VAR = "MCP_REGISTRY_HOST"
PORT_ENV_VAR = "PORT"
LOG_LEVEL_ENV_VAR = "MCP_REGISTRY_LOG_LEVEL"

_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_FILE = _REPO_ROOT / "data" / "servers.json"

_config: Optional[RegistryConfig] = None
_db_manager: Optional[DatasetManager] = None
_repository: Optional[Registry] = None


def get_data_file() -> Path:
    """
    Determine the dataset path.

    Priority:
    1. Environment variable MCP_REGISTRY_DATA_FILE
    2. '<repo root>/data/servers.json'
    """
    env_path = os.environ.get(DATA_FILE_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return _DEFAULT_DATA_FILE


def load_registry_config() -> RegistryConfig:
    """
    Build the config from the environment. Invalid values (a non-numeric
    PORT, say) raise a pydantic ValidationError naming the field.
    """
    return RegistryConfig(
        data_file=get_data_file(),
        host=os.environ.get(HOST_ENV_VAR, "0.0.0.0"),
        port=os.environ.get(PORT_ENV_VAR, "3000"),
        log_level=os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper(),
    )


def get_registry_config() -> RegistryConfig:
    global _config
    if _config is None:
        _config = load_registry_config()
    return _config


def get_db_manager() -> DatasetManager:
    global _db_manager
    if _db_manager is None:
        _db_manager = JsonDatasetManager(get_registry_config().data_file)
        _db_manager.initialize()
    return _db_manager


def get_repository() -> Registry:
    global _repository
    if _repository is None:
        _repository = Registry(get_db_manager(), get_registry_config())
    return _repository
