"""
Parser module for the IP protocol registry.

Turns an IANA ``protocol-numbers.csv`` style dataset into a RegistrySnapshot.
"""

import csv
import io
import logging
import os
import re
from typing import IO, Iterator, Optional, Union

from .config import DatasetFormat
from .errors import EmptySourceError, MalformedSourceError, SourceUnavailableError
from .models import ProtocolEntry, RegistrySnapshot

logger = logging.getLogger(__name__)

DatasetSource = Union[bytes, bytearray, memoryview, str, os.PathLike, IO]

_SINGLE_PATTERN = re.compile(r"[0-9]+")
_RANGE_PATTERN = re.compile(r"([0-9]+)\s*-\s*([0-9]+)")


def parse_decimal_field(value: str) -> Optional[tuple[int, int]]:
    """
    Parse the "Decimal" column into an inclusive (start, end) pair.

    Accepted forms are a single number ("6") or a range ("148-252").
    Placeholders such as "Reserved" and reversed ranges return None.
    """
    value = value.strip()
    if not value or not value[0].isascii() or not value[0].isdigit():
        return None

    # int() refuses digit strings past sys.get_int_max_str_digits()
    try:
        if match := _SINGLE_PATTERN.fullmatch(value):
            number = int(match.group(0))
            return number, number

        if match := _RANGE_PATTERN.fullmatch(value):
            start, end = int(match.group(1)), int(match.group(2))
            if end < start:
                return None
            return start, end
    except ValueError:
        return None

    return None


def normalize_protocol_name(name: str) -> str:
    """Lowercase a long protocol name and collapse its whitespace."""
    return " ".join(name.lower().split())


class SourceReader:
    """Reads raw dataset bytes from paths, byte strings and file objects."""

    def read_bytes(self, source: DatasetSource) -> bytes:
        """Return the full contents of ``source``."""
        match source:
            case bytes() | bytearray() | memoryview():
                return bytes(source)
            case str() | os.PathLike():
                return self._read_path(source)
            case _ if hasattr(source, "read"):
                return self._read_stream(source)
            case _:
                raise TypeError(
                    f"Unsupported dataset source type: {type(source).__name__}"
                )

    @staticmethod
    def _read_path(path: Union[str, os.PathLike]) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as exc:
            raise SourceUnavailableError(
                f"Cannot open protocol dataset {os.fspath(path)!r}: {exc}"
            ) from exc

    @staticmethod
    def _read_stream(stream: IO) -> bytes:
        try:
            data = stream.read()
        except OSError as exc:
            raise MalformedSourceError(f"Cannot read protocol dataset: {exc}") from exc
        if isinstance(data, str):
            return data.encode("utf-8")
        return bytes(data)


class RecordReader:
    """Splits dataset text into padded CSV rows."""

    def __init__(self, comment_marker: str = DatasetFormat.COMMENT_MARKER):
        self.comment_marker = comment_marker

    def read_rows(self, data: bytes) -> list[list[str]]:
        """Decode ``data`` and return all non-empty, non-comment rows."""
        try:
            text = data.decode(DatasetFormat.ENCODING)
        except UnicodeDecodeError as exc:
            raise MalformedSourceError(f"Protocol dataset is not UTF-8: {exc}") from exc

        reader = csv.reader(
            self._data_lines(text),
            delimiter=DatasetFormat.DELIMITER,
            strict=True,
        )
        try:
            return [self._pad(row) for row in reader if row]
        except csv.Error as exc:
            raise MalformedSourceError(
                f"Malformed protocol dataset near line {reader.line_num}: {exc}"
            ) from exc

    def _data_lines(self, text: str) -> Iterator[str]:
        """Yield physical lines, dropping comments that start a record."""
        in_quotes = False
        for line_num, line in enumerate(io.StringIO(text, newline=""), start=1):
            if not in_quotes and line.startswith(self.comment_marker):
                continue
            in_quotes = self._scan_quotes(line, in_quotes, line_num)
            yield line

    @staticmethod
    def _scan_quotes(line: str, in_quotes: bool, line_num: int) -> bool:
        """Return whether a quoted field is still open at the end of ``line``.

        A quote inside an unquoted field is rejected, which the csv module
        would otherwise accept as a literal character.
        """
        delimiter, quote = DatasetFormat.DELIMITER, DatasetFormat.QUOTE
        field_start = not in_quotes
        i = 0
        while i < len(line):
            char = line[i]
            if in_quotes:
                if char == quote:
                    if line[i + 1 : i + 2] == quote:
                        i += 1
                    else:
                        in_quotes = False
            elif char == quote:
                if not field_start:
                    raise MalformedSourceError(
                        f"Malformed protocol dataset at line {line_num}: "
                        f"bare {quote} in unquoted field"
                    )
                in_quotes = True
            field_start = not in_quotes and char in (delimiter, "\r", "\n")
            i += 1
        return in_quotes

    @staticmethod
    def _pad(row: list[str]) -> list[str]:
        width = DatasetFormat.FIELD_COUNT
        return (row + [""] * width)[:width]


class SnapshotBuilder:
    """Accumulates entries and their first-claim-wins indexes."""

    def __init__(self):
        self._entries: list[ProtocolEntry] = []
        self._by_number: dict[int, ProtocolEntry] = {}
        self._by_keyword: dict[str, ProtocolEntry] = {}
        self._by_protocol_name: dict[str, ProtocolEntry] = {}

    def add(self, entry: ProtocolEntry) -> None:
        """Append an entry and bind any keys not already claimed."""
        self._entries.append(entry)

        for number in entry.numbers:
            self._by_number.setdefault(number, entry)

        if entry.keyword:
            self._by_keyword.setdefault(entry.keyword.upper(), entry)

        if entry.protocol:
            self._by_protocol_name.setdefault(
                normalize_protocol_name(entry.protocol), entry
            )

    def build(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            entries=tuple(self._entries),
            by_number=self._by_number,
            by_keyword=self._by_keyword,
            by_protocol_name=self._by_protocol_name,
        )


class DatasetParser:
    """Main parser combining source reading, CSV parsing and indexing."""

    def __init__(self, comment_marker: str = DatasetFormat.COMMENT_MARKER):
        self.source_reader = SourceReader()
        self.record_reader = RecordReader(comment_marker)

    def parse(self, source: DatasetSource) -> RegistrySnapshot:
        """Parse ``source`` into a snapshot, raising RegistryError on failure."""
        data = self.source_reader.read_bytes(source)
        if not data:
            raise EmptySourceError("Protocol dataset is empty")

        rows = self.record_reader.read_rows(data)
        if len(rows) < 2:
            raise EmptySourceError("Protocol dataset has no rows after the header")

        self._check_header(rows[0])
        builder = SnapshotBuilder()
        skipped = 0
        for row in rows[1:]:
            if entry := self._row_to_entry(row):
                builder.add(entry)
            else:
                skipped += 1

        snapshot = builder.build()
        logger.debug(
            "Parsed %d protocol entries, skipped %d rows", len(snapshot), skipped
        )
        return snapshot

    @staticmethod
    def _check_header(header: list[str]) -> None:
        """Warn when the header row does not name the expected columns."""
        names = [field.strip() for field in header]
        if [name.lower() for name in names] != [
            name.lower() for name in DatasetFormat.HEADER
        ]:
            logger.warning(
                "Unexpected protocol dataset header %s, expected %s",
                names,
                list(DatasetFormat.HEADER),
            )

    @staticmethod
    def _row_to_entry(row: list[str]) -> Optional[ProtocolEntry]:
        decimal, keyword, protocol, ipv6_ext_header, reference = (
            field.strip() for field in row
        )
        if not decimal:
            return None
        if (bounds := parse_decimal_field(decimal)) is None:
            return None

        start, end = bounds
        return ProtocolEntry(
            range_start=start,
            range_end=end,
            keyword=keyword,
            protocol=protocol,
            ipv6_ext_header=ipv6_ext_header,
            reference=reference,
        )


# Public API
def parse_source(
    source: DatasetSource, comment_marker: str = DatasetFormat.COMMENT_MARKER
) -> RegistrySnapshot:
    """Parse a protocol numbers dataset into a RegistrySnapshot."""
    return DatasetParser(comment_marker).parse(source)
