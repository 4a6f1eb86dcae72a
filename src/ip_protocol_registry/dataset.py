"""
Access to the default protocol numbers dataset shipped with the package.
"""

from importlib import resources
from pathlib import Path
from typing import Callable, Optional

from .config import DatasetFormat
from .errors import SourceUnavailableError

DatasetProvider = Callable[[], bytes]


def read_packaged_dataset() -> bytes:
    """Return the bytes of the bundled ``protocol-numbers.csv``."""
    resource = resources.files(__package__).joinpath(
        "data", DatasetFormat.PACKAGE_DATA_FILE
    )
    try:
        return resource.read_bytes()
    except OSError as exc:
        raise SourceUnavailableError(
            f"Packaged dataset {DatasetFormat.PACKAGE_DATA_FILE} is missing: {exc}"
        ) from exc


def dataset_provider_for(dataset_path: Optional[str]) -> DatasetProvider:
    """Build the default-dataset provider for a configured path, if any."""
    if not dataset_path:
        return read_packaged_dataset

    path = Path(dataset_path).expanduser()

    def read_configured_dataset() -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise SourceUnavailableError(
                f"Cannot open protocol dataset {str(path)!r}: {exc}"
            ) from exc

    return read_configured_dataset
