"""
Logging Configuration - Handlers for the Rate Engine

setup_logging() is called once by the widget host (through
fxwidget.app.configure_logging). Every module logs through
logging.getLogger(__name__); this module only decides where records go:
stdout, a size-rotated fxwidget.log, or both.

Files that USE this module:
- fxwidget.app (configure_logging passes the Settings log fields)
- tests.test_app (rotating file check)

Files that this module USES:
- None (stdlib logging only)
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "fxwidget.log"

PathLike = Union[str, Path]


def _resolve_log_path(log_file: Optional[PathLike], log_dir: Optional[PathLike]) -> Optional[Path]:
    """A directory wins over an explicit file; the parent is created either way."""
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _stdout_wanted(log_to_stdout: Optional[bool]) -> bool:
    if log_to_stdout is not None:
        return log_to_stdout
    return os.environ.get("FXWIDGET_LOG_STDOUT", "true").lower() == "true"


def setup_logging(
    level=logging.INFO,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    log_to_stdout: Optional[bool] = None,
) -> None:
    """
    Route engine logs to stdout and/or a rotating file.

    Replaces any handlers already on the root logger, so calling it again
    (e.g. after settings change) does not duplicate output.

    Args:
        level: Root log level
        log_file: Log file path
        log_dir: Directory for fxwidget.log (takes precedence over log_file)
        max_bytes: Rotation size per file
        backup_count: Rotated files to keep
        log_to_stdout: Stdout on/off; None reads FXWIDGET_LOG_STDOUT (default true)
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    log_path = _resolve_log_path(log_file, log_dir)
    if log_path is not None:
        handlers.append(
            RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )

    # Stdout stays on when nothing else would receive the records
    if _stdout_wanted(log_to_stdout) or not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # requests logs every pooled connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info(
        "Logging configured: %s, level=%s",
        f"file={log_path}" if log_path else "stdout only",
        logging.getLevelName(level),
    )
