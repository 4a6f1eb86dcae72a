"""
Exceptions raised by the IP protocol registry.

Lookups never raise: a missing protocol is reported as ``None``. These
errors are reserved for loading a dataset and for bad configuration.
"""


class RegistryError(Exception):
    """Base class for dataset loading failures."""


class EmptySourceError(RegistryError):
    """The dataset had no bytes, or no data rows after the header."""


class MalformedSourceError(RegistryError):
    """The dataset could not be decoded or read as CSV."""


class SourceUnavailableError(RegistryError):
    """The dataset file or packaged resource could not be opened."""


class ConfigurationError(ValueError):
    """Invalid registry configuration."""
