"""
Thread-safe, lazily loaded registry of IP protocol numbers.

A ProtocolRegistry moves through an explicit state machine::

    UNINITIALIZED -> INITIALIZING -> READY | FAILED

The first query loads the default dataset; concurrent callers wait on a
condition until that single load finishes. A failed default load is cached
and every later query answers ``None`` without retrying. ``load_from_*``
replaces the snapshot wholesale: the new snapshot is parsed off to the side
and published with one reference swap, so readers see either the old or the
new data in full, never a mix.
"""

import logging
import os
import threading
import time
from enum import Enum
from typing import Callable, Optional, Union

from .config import RegistryConfig
from .dataset import DatasetProvider, dataset_provider_for
from .errors import RegistryError
from .logging_utils import generate_load_id, log_load_end, log_load_start
from .models import ProtocolEntry, RegistrySnapshot
from .parser import DatasetParser, DatasetSource, normalize_protocol_name

logger = logging.getLogger(__name__)


class LoadState(Enum):
    """Lifecycle of a registry snapshot."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


def _describe_source(source: DatasetSource) -> str:
    match source:
        case bytes() | bytearray() | memoryview():
            return f"<{len(source)} bytes>"
        case str() | os.PathLike():
            return os.fspath(source)
        case _:
            return str(getattr(source, "name", type(source).__name__))


class ProtocolRegistry:
    """Bidirectional lookup between IP protocol numbers and their names."""

    def __init__(
        self,
        dataset_provider: Optional[DatasetProvider] = None,
        config: Optional[RegistryConfig] = None,
    ):
        self.config = config or RegistryConfig()
        self.config.validate()
        self._dataset_provider = dataset_provider or dataset_provider_for(
            self.config.dataset_path
        )
        self._parser = DatasetParser(self.config.comment_marker)

        self._condition = threading.Condition()
        self._state = LoadState.UNINITIALIZED
        self._snapshot: Optional[RegistrySnapshot] = None
        self._error: Optional[BaseException] = None

    @property
    def state(self) -> LoadState:
        with self._condition:
            return self._state

    @property
    def last_error(self) -> Optional[BaseException]:
        """The error cached by the most recent failed load, if any."""
        with self._condition:
            return self._error

    # -- lifecycle -----------------------------------------------------------

    def _current_snapshot(self) -> Optional[RegistrySnapshot]:
        """Return the published snapshot, loading the default dataset once."""
        with self._condition:
            self._condition.wait_for(self._is_settled)
            if self._state is not LoadState.UNINITIALIZED:
                return self._snapshot
            self._state = LoadState.INITIALIZING

        try:
            return self._run_load(
                lambda: self._parser.parse(self._dataset_provider()),
                description="default dataset",
            )
        except RegistryError:
            return None

    def _begin_override(self) -> Optional[RegistrySnapshot]:
        """Wait for any in-flight load, then claim the loader slot."""
        with self._condition:
            self._condition.wait_for(self._is_settled)
            previous = self._snapshot
            self._state = LoadState.INITIALIZING
            return previous

    def _is_settled(self) -> bool:
        return self._state is not LoadState.INITIALIZING

    def _run_load(
        self,
        load: Callable[[], RegistrySnapshot],
        description: str,
        previous: Optional[RegistrySnapshot] = None,
    ) -> RegistrySnapshot:
        """Build a snapshot outside the lock and publish the outcome."""
        load_id = generate_load_id()
        log_load_start(logger, load_id, source=description)
        started = time.perf_counter()

        try:
            snapshot = load()
        except BaseException as exc:
            # KeyboardInterrupt and friends must not leave the state INITIALIZING
            kept_previous = self._publish_failure(exc, previous)
            log_load_end(
                logger,
                load_id,
                False,
                source=description,
                error=f"{type(exc).__name__}: {exc}",
                kept_previous=kept_previous,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        self._publish(snapshot)
        log_load_end(
            logger,
            load_id,
            True,
            source=description,
            entries=len(snapshot),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return snapshot

    def _publish(self, snapshot: RegistrySnapshot) -> None:
        with self._condition:
            self._snapshot = snapshot
            self._error = None
            self._state = LoadState.READY
            self._condition.notify_all()

    def _publish_failure(
        self, error: BaseException, previous: Optional[RegistrySnapshot]
    ) -> bool:
        keep = previous is not None and self.config.keep_previous_on_failure
        with self._condition:
            self._error = error
            if keep:
                self._snapshot = previous
                self._state = LoadState.READY
            else:
                self._snapshot = None
                self._state = LoadState.FAILED
            self._condition.notify_all()
        return keep

    def load_from_source(self, source: DatasetSource) -> None:
        """
        Replace the registry contents with a freshly parsed dataset.

        ``source`` may be bytes, a file path or a readable file object.
        Raises a RegistryError if the dataset cannot be parsed; in that case
        the registry is left in the FAILED state unless the config asks to
        keep the previous snapshot.
        """
        previous = self._begin_override()
        self._run_load(
            lambda: self._parser.parse(source),
            description=_describe_source(source),
            previous=previous,
        )

    def load_from_file(self, path: Union[str, os.PathLike]) -> None:
        """Parse the CSV file at ``path`` and override the current data."""
        self.load_from_source(os.fspath(path))

    def load_from_reader(self, reader) -> None:
        """Parse a readable file object and override the current data."""
        if not hasattr(reader, "read"):
            raise TypeError(f"Expected a readable object, got {type(reader).__name__}")
        self.load_from_source(reader)

    def reset(self) -> None:
        """Forget the current snapshot; the next query reloads the default."""
        with self._condition:
            self._condition.wait_for(self._is_settled)
            self._snapshot = None
            self._error = None
            self._state = LoadState.UNINITIALIZED

    # -- queries -------------------------------------------------------------

    def entries(self) -> tuple[ProtocolEntry, ...]:
        """All entries of the current snapshot, in dataset order."""
        if (snapshot := self._current_snapshot()) is None:
            return ()
        return snapshot.entries

    def lookup_by_number(self, number: int) -> Optional[ProtocolEntry]:
        """Return the entry covering protocol ``number``, e.g. 6 -> TCP."""
        if (snapshot := self._current_snapshot()) is None:
            return None
        return snapshot.by_number.get(number)

    def lookup_decimal(self, name: str) -> Optional[int]:
        """
        Return the protocol number for a keyword or long protocol name.

        The keyword ("TCP") is tried first, case-insensitively; then the
        long name ("Transmission Control"), ignoring case and runs of
        whitespace. For range rows the first number of the range is returned.
        """
        if (snapshot := self._current_snapshot()) is None:
            return None

        name = name.strip()
        if not name:
            return None

        if entry := snapshot.by_keyword.get(name.upper()):
            return entry.range_start

        if entry := snapshot.by_protocol_name.get(normalize_protocol_name(name)):
            return entry.range_start

        return None

    def lookup_keyword(self, number: int) -> Optional[str]:
        """Return the short keyword for ``number``, e.g. 6 -> "TCP"."""
        entry = self.lookup_by_number(number)
        if entry is None or not entry.keyword:
            return None
        return entry.keyword

    def lookup_protocol_name(self, number: int) -> Optional[str]:
        """Return the long name for ``number``, e.g. 6 -> "Transmission Control"."""
        entry = self.lookup_by_number(number)
        if entry is None or not entry.protocol:
            return None
        return entry.protocol


_default_registry: Optional[ProtocolRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> ProtocolRegistry:
    """Return the process-wide registry, creating it from the environment."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            config = RegistryConfig.from_env()
            logging.getLogger(__package__).setLevel(config.log_level)
            _default_registry = ProtocolRegistry(config=config)
        return _default_registry


# Public API functions backed by the process-wide registry
def lookup_by_number(number: int) -> Optional[ProtocolEntry]:
    """Return the entry covering protocol ``number``."""
    return get_default_registry().lookup_by_number(number)


def lookup_decimal(name: str) -> Optional[int]:
    """Return the protocol number for a keyword or long protocol name."""
    return get_default_registry().lookup_decimal(name)


def lookup_keyword(number: int) -> Optional[str]:
    """Return the short keyword for a protocol number."""
    return get_default_registry().lookup_keyword(number)


def lookup_protocol_name(number: int) -> Optional[str]:
    """Return the long protocol name for a protocol number."""
    return get_default_registry().lookup_protocol_name(number)


def load_from_source(source: DatasetSource) -> None:
    """Override the process-wide registry with a new dataset."""
    get_default_registry().load_from_source(source)


def load_from_file(path: Union[str, os.PathLike]) -> None:
    """Override the process-wide registry with the CSV file at ``path``."""
    get_default_registry().load_from_file(path)


def load_from_reader(reader) -> None:
    """Override the process-wide registry from a readable file object."""
    get_default_registry().load_from_reader(reader)
