"""Protocol number to display label utilities."""

from typing import Optional, Union

from .registry import ProtocolRegistry, get_default_registry


def _as_number(protocol_number: Union[int, str]) -> Optional[int]:
    match protocol_number:
        case bool():
            return None
        case int():
            return protocol_number
        case str() if protocol_number.strip().isdecimal():
            return int(protocol_number.strip())
        case _:
            return None


def get_protocol_label(
    protocol_number: Union[int, str],
    registry: Optional[ProtocolRegistry] = None,
) -> str:
    """Convert a protocol number to its keyword, e.g. "6" -> "TCP".

    Numbers without a keyword fall back to the long name, then to
    ``Protocol-<n>``.
    """
    registry = registry or get_default_registry()
    if (number := _as_number(protocol_number)) is not None:
        if keyword := registry.lookup_keyword(number):
            return keyword
        if name := registry.lookup_protocol_name(number):
            return name
    return f"Protocol-{protocol_number}"


def format_protocol(
    protocol_number: Union[int, str],
    registry: Optional[ProtocolRegistry] = None,
) -> str:
    """Format a protocol number as ``"6 (TCP, Transmission Control)"``."""
    registry = registry or get_default_registry()
    number = _as_number(protocol_number)
    entry = registry.lookup_by_number(number) if number is not None else None
    if entry is None:
        return f"{protocol_number} (unknown)"

    names = [name for name in (entry.keyword, entry.protocol) if name]
    if not names:
        return f"{number} (unknown)"
    return f"{number} ({', '.join(names)})"
