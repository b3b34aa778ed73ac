from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from agari.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

logger = logging.getLogger(__name__)


def _log_file(log_dir: str) -> Path:
    dir_path = Path(log_dir)
    dir_path.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime(LOG_FILE_TIMESTAMP_FORMAT)
    return dir_path / f"agari_{stamp}.log"


def setup_logging(config: Settings) -> Path | None:
    """Route the root logger to stdout, plus ``agari_<utc stamp>.log`` under ``config.log_dir`` when set.

    Handlers from earlier calls are replaced. Returns the log file path, if any.
    """
    root = logging.getLogger()
    root.setLevel(config.log_level.upper())
    root.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_path = _log_file(config.log_dir) if config.log_dir else None
    if file_path is not None:
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logger.debug(f"logging at {config.log_level.upper()} to {file_path or 'stdout'}")
    return file_path
