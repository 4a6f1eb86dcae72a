"""
IP protocol registry package.

Bidirectional lookup between IP protocol numbers and their IANA keywords
and long names, backed by a bundled ``protocol-numbers.csv``.
"""

import logging
from typing import Final

# Package metadata
__version__: Final[str] = "1.0.0"
__description__: Final[str] = "IANA IP protocol number registry"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API exports
from .config import RegistryConfig
from .errors import (
    ConfigurationError,
    EmptySourceError,
    MalformedSourceError,
    RegistryError,
    SourceUnavailableError,
)
from .models import ProtocolEntry, RegistrySnapshot
from .parser import normalize_protocol_name, parse_decimal_field, parse_source
from .protocol_utils import format_protocol, get_protocol_label
from .registry import (
    LoadState,
    ProtocolRegistry,
    get_default_registry,
    load_from_file,
    load_from_reader,
    load_from_source,
    lookup_by_number,
    lookup_decimal,
    lookup_keyword,
    lookup_protocol_name,
)

__all__ = [
    # Lookups
    "lookup_by_number",
    "lookup_decimal",
    "lookup_keyword",
    "lookup_protocol_name",
    # Overrides
    "load_from_file",
    "load_from_reader",
    "load_from_source",
    # Registry
    "LoadState",
    "ProtocolRegistry",
    "get_default_registry",
    # Models
    "ProtocolEntry",
    "RegistrySnapshot",
    # Parsing
    "normalize_protocol_name",
    "parse_decimal_field",
    "parse_source",
    # Configuration
    "RegistryConfig",
    # Errors
    "ConfigurationError",
    "EmptySourceError",
    "MalformedSourceError",
    "RegistryError",
    "SourceUnavailableError",
    # Display helpers
    "format_protocol",
    "get_protocol_label",
]
