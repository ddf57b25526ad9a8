# Logging for Salesforce session revocation.
#
# Importing this package never touches the root logger; the host framework owns
# the sinks. setup_logging() is for standalone runs and only manages handlers it
# added itself to the package logger.

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "salesforce_revoke_session"
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_OWNED_MARKER = "_salesforce_revoke_session_handler"


def _owned(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED_MARKER, True)
    return handler


def _file_handler(path: Path, level: int, max_bytes: int, backups: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backups, encoding='utf-8'
    )
    handler.setLevel(level)
    return handler


def setup_logging(log_level: Optional[str] = None,
                  log_to_file: Optional[bool] = None,
                  log_dir: Optional[str] = None,
                  max_file_size: int = 10 * 1024 * 1024,
                  backup_count: int = 5) -> logging.Logger:
    """
    Attach console (and optionally rotating file) handlers to the package logger.

    Unset arguments fall back to LOG_LEVEL, LOG_TO_FILE and LOG_DIR. Calling it
    again replaces the handlers from the previous call; handlers attached by
    anyone else, on this logger or on the root logger, are left alone.

    Returns:
        The package logger
    """
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if log_to_file is None:
        log_to_file = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    log_dir = log_dir or os.getenv("LOG_DIR", "logs")
    level = getattr(logging, log_level, logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in [h for h in logger.handlers if getattr(h, _OWNED_MARKER, False)]:
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler()]
    handlers[0].setLevel(level)
    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(
            log_path / "salesforce_revoke_session.log", level, max_file_size, backup_count))
        handlers.append(_file_handler(
            log_path / "salesforce_revoke_session_errors.log", logging.ERROR, max_file_size, backup_count))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(_owned(handler))

    logger.debug(f"Logging configured (level={log_level}, to_file={log_to_file})")
    return logger


def log_revocation_action(username: str, action: str, result: str,
                          details: Optional[str] = None):
    """
    Log a single revocation action with structured format.

    Args:
        username: Salesforce username being processed
        action: Action being performed (e.g., "REVOKE_SESSIONS")
        result: Result of the action ("SUCCESS", "FAILED", "SKIPPED")
        details: Additional details about the action
    """
    logger = logging.getLogger(__name__)

    message = f"REVOCATION_ACTION | {username} | {action} | {result}"
    if details:
        message += f" | {details}"

    if result == "SUCCESS":
        logger.info(message)
    elif result == "FAILED":
        logger.error(message)
    else:
        logger.warning(message)


_package_logger = logging.getLogger(PACKAGE_LOGGER)
if not any(isinstance(h, logging.NullHandler) for h in _package_logger.handlers):
    _package_logger.addHandler(logging.NullHandler())
