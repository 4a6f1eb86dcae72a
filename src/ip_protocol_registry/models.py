"""
Data model for the IP protocol registry.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ProtocolEntry:
    """One row of the protocol numbers table, possibly covering a range.

    ``range_start == range_end`` for single-number rows such as ``6`` (TCP);
    rows like ``148-252`` carry the inclusive bounds.
    """

    range_start: int
    range_end: int
    keyword: str = ""
    protocol: str = ""
    ipv6_ext_header: str = ""
    reference: str = ""

    def __post_init__(self) -> None:
        if self.range_start < 0 or self.range_end < self.range_start:
            raise ValueError(
                f"Invalid protocol range {self.range_start}-{self.range_end}"
            )

    @property
    def is_range(self) -> bool:
        return self.range_end > self.range_start

    @property
    def numbers(self) -> range:
        return range(self.range_start, self.range_end + 1)

    @property
    def is_ipv6_extension_header(self) -> bool:
        return self.ipv6_ext_header.upper() == "Y"

    def __contains__(self, number: object) -> bool:
        return isinstance(number, int) and self.range_start <= number <= self.range_end


def _frozen(mapping: dict) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable result of one successful parse: entries plus three indexes."""

    entries: tuple[ProtocolEntry, ...] = ()
    by_number: Mapping[int, ProtocolEntry] = field(default_factory=dict)
    by_keyword: Mapping[str, ProtocolEntry] = field(default_factory=dict)
    by_protocol_name: Mapping[str, ProtocolEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "by_number", _frozen(self.by_number))
        object.__setattr__(self, "by_keyword", _frozen(self.by_keyword))
        object.__setattr__(self, "by_protocol_name", _frozen(self.by_protocol_name))

    def __len__(self) -> int:
        return len(self.entries)
