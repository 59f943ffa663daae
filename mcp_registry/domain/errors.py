class RegistryError(Exception):
    """Base class for registry failures."""


class ServerNotFoundError(RegistryError, LookupError):
    """A server name, or a name/version pair, could not be resolved."""


class DatasetLoadError(RegistryError):
    """The dataset file is missing or malformed; the process cannot serve."""
