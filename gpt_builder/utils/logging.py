# gpt_builder/utils/logging.py

import logging
from logging.handlers import RotatingFileHandler
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def configure_logger(
    name: str = "gptbuilder",
    log_dir: str | None = None,
    level: str | int | None = None,
) -> logging.Logger:
    """
    Attach console + rotating-file handlers to ``name`` exactly once.

    ``log_dir`` defaults to $LOG_DIR (or ./logs) and ``level`` to $LOG_LEVEL
    (or INFO). Calling again, e.g. after a uvicorn --reload re-import, only
    updates the level.
    """
    log_dir = log_dir or os.getenv("LOG_DIR", "logs")
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    log = logging.getLogger(name)
    log.setLevel(level)

    if not log.handlers:
        os.makedirs(log_dir, exist_ok=True)
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)

        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "app.log"),
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)

        log.addHandler(console_handler)
        log.addHandler(file_handler)

    # uvicorn installs its own root handlers; keep our lines single
    log.propagate = False
    return log


def format_event(event: str, **fields) -> str:
    parts = [f"event={event}"] + [f"{k}={v}" for k, v in fields.items()]
    return " ".join(parts)


logger = configure_logger()


def log_event(event: str, level: int = logging.INFO, **fields) -> None:
    """Emit a greppable ``event=<name> key=value ...`` line, e.g. retrieval_degraded."""
    logger.log(level, format_event(event, **fields))
