from abc import ABC, abstractmethod
from typing import Tuple

from mcp_registry.domain.models import ServerResponse


class DatasetManager(ABC):
    """
    Abstract base class for the read-only dataset backing the registry.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Load the dataset. Raises DatasetLoadError when it cannot be served."""
        pass

    @abstractmethod
    def get_servers(self) -> Tuple[ServerResponse, ...]:
        """All entries, in load order."""
        pass
