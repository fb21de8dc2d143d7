"""
Logging configuration for stdout and file output.
"""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> Path | None:
    """
    Configure the root logger to write to stdout, and to a log file when log_dir is given.

    The file is named after the UTC start time (e.g. logs/2026-10-17_14-30-00.log)
    and its path is returned. Otherwise returns None.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_path = None
    if log_dir is not None:
        dir_path = Path(log_dir)
        dir_path.mkdir(parents=True, exist_ok=True)
        file_path = dir_path / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
        handlers.append(logging.FileHandler(file_path))

    # force replaces handlers left by an earlier call
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    return file_path
