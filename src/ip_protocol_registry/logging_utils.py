"""Logging utilities with load-attempt tracking."""

import json
import logging
import logging.handlers
import uuid
from pathlib import Path
from typing import Any, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    name: str = "ip_protocol_registry",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Setup logger with a console handler and an optional rotating file."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Rotating file handler (5MB max, 3 backups)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def generate_load_id() -> str:
    """Generate unique dataset load ID."""
    return str(uuid.uuid4())[:8]


def log_load_start(logger: logging.Logger, load_id: str, **kwargs: Any) -> None:
    """Log the start of a dataset load with its parameters."""
    logger.debug(f"Load {load_id} started - {kwargs}")


def log_load_end(
    logger: logging.Logger,
    load_id: str,
    success: bool,
    **kwargs: Any,
) -> None:
    """Log dataset load completion; failures are logged as errors."""
    status = "SUCCESS" if success else "FAILED"
    log_data = {"load_id": load_id, "status": status, **kwargs}
    message = f"Load {load_id} {status} - {json.dumps(log_data, default=str)}"

    if success:
        logger.info(message)
    else:
        logger.error(message)
