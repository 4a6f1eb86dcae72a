"""
Configuration module for the IP protocol registry.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Final, Optional

from .errors import ConfigurationError


class DatasetFormat:
    """Layout of the protocol numbers CSV."""

    DELIMITER: Final[str] = ","
    QUOTE: Final[str] = '"'
    COMMENT_MARKER: Final[str] = "#"
    FIELD_COUNT: Final[int] = 5
    ENCODING: Final[str] = "utf-8-sig"

    # Decimal,Keyword,Protocol,IPv6 Extension Header,Reference
    HEADER: Final[tuple[str, ...]] = (
        "Decimal",
        "Keyword",
        "Protocol",
        "IPv6 Extension Header",
        "Reference",
    )

    PACKAGE_DATA_FILE: Final[str] = "protocol-numbers.csv"


class EnvironmentVariables:
    """Environment variables read when building the default configuration."""

    DATASET_PATH: Final[str] = "IP_PROTOCOL_REGISTRY_DATASET"
    KEEP_PREVIOUS: Final[str] = "IP_PROTOCOL_REGISTRY_KEEP_PREVIOUS"
    LOG_LEVEL: Final[str] = "IP_PROTOCOL_REGISTRY_LOG_LEVEL"


_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class DefaultConfiguration:
    """Provides default configuration values."""

    DEFAULT_LOG_LEVEL: Final[str] = "WARNING"

    @classmethod
    def get_default_config(cls) -> dict[str, Any]:
        """Get default configuration dictionary, honouring the environment."""
        return {
            "dataset_path": os.environ.get(EnvironmentVariables.DATASET_PATH) or None,
            "comment_marker": DatasetFormat.COMMENT_MARKER,
            "keep_previous_on_failure": os.environ.get(
                EnvironmentVariables.KEEP_PREVIOUS, ""
            ).strip().lower()
            in _TRUTHY,
            "log_level": os.environ.get(
                EnvironmentVariables.LOG_LEVEL, cls.DEFAULT_LOG_LEVEL
            ).upper(),
        }


@dataclass(frozen=True)
class RegistryConfig:
    """Structured configuration for a ProtocolRegistry."""

    dataset_path: Optional[str] = None
    comment_marker: str = DatasetFormat.COMMENT_MARKER
    keep_previous_on_failure: bool = False
    log_level: str = DefaultConfiguration.DEFAULT_LOG_LEVEL

    def validate(self) -> None:
        """Validate configuration parameters."""
        if len(self.comment_marker) != 1:
            raise ConfigurationError("Comment marker must be a single character")
        if self.comment_marker in (
            DatasetFormat.DELIMITER,
            DatasetFormat.QUOTE,
            "\r",
            "\n",
        ):
            raise ConfigurationError(
                f"Comment marker cannot be {self.comment_marker!r}"
            )
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> "RegistryConfig":
        """Build and validate a config from the defaults and environment."""
        config = cls(**DefaultConfiguration.get_default_config())
        config.validate()
        return config
