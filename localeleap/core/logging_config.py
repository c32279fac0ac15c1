"""
Centralized Logging Configuration for LocaleLeap

Sets up one logging configuration shared by the redirect engine, the page
scanner and the settings store. Everything goes to:

1. logs/localeleap/system.log - all Python logging (rotating)
2. stdout - same records, shorter format

Usage in any module:
    from localeleap.core.logging_config import setup_logging

    # Call once at host startup
    setup_logging()

    # Get a logger for your module
    logger = logging.getLogger(__name__)
    logger.info("My message")

Debugging:
    tail -f logs/localeleap/system.log
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# =============================================================================
# Configuration
# =============================================================================

LOG_DIR = Path("logs/localeleap")
SYSTEM_LOG_NAME = "system.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-20s | %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"

# =============================================================================
# Global State
# =============================================================================

_logging_configured = False
_file_handler: Optional[RotatingFileHandler] = None
_log_dir: Path = LOG_DIR


# =============================================================================
# Setup Functions
# =============================================================================


def setup_logging(
    level: Optional[str] = None,
    log_to_console: bool = True,
    log_to_file: bool = True,
    log_dir: Optional[Path] = None,
    service_name: str = "localeleap",
) -> None:
    """
    Configure unified logging for LocaleLeap.

    Should be called ONCE by the host glue before events start flowing.
    Later calls are ignored.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO.
        log_to_console: Whether to also log to stdout (default True)
        log_to_file: Whether to log to system.log (default True)
        log_dir: Directory for system.log. Defaults to logs/localeleap
        service_name: Logger name used for the startup marker
    """
    global _logging_configured, _file_handler, _log_dir

    if _logging_configured:
        return

    if level is None:
        level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers (prevents duplicates)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # === File Handler (system.log) ===
    if log_to_file:
        _log_dir = Path(log_dir) if log_dir is not None else LOG_DIR
        _log_dir.mkdir(parents=True, exist_ok=True)
        _file_handler = RotatingFileHandler(
            _log_dir / SYSTEM_LOG_NAME,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        _file_handler.setLevel(log_level)
        _file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root_logger.addHandler(_file_handler)

    # === Console Handler (stdout) ===
    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATE_FORMAT))
        root_logger.addHandler(console_handler)

    # === Reduce noise from chatty libraries ===
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    _logging_configured = True

    logger = logging.getLogger(service_name)
    logger.info("=" * 60)
    logger.info(f"LOGGING INITIALIZED - {service_name.upper()}")
    if log_to_file:
        logger.info(f"Log file: {get_system_log_path().absolute()}")
    logger.info(f"Log level: {level.upper()}")
    logger.info("=" * 60)


def setup_logging_from_settings(service_name: str = "localeleap") -> None:
    """Configure logging from the cached application settings."""
    from localeleap.core.config import get_settings

    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_to_console=settings.log.to_console,
        log_to_file=settings.log.to_file,
        log_dir=settings.log.directory,
        service_name=service_name,
    )


def get_system_log_path() -> Path:
    """Get the path to the system log file."""
    return _log_dir / SYSTEM_LOG_NAME


# =============================================================================
# Convenience Functions
# =============================================================================


def log_navigation_start(logger: logging.Logger, session_id: int, url: str, candidates: int):
    """Log the seeding of a navigation entry with standard format."""
    logger.info(f"[tab {session_id}] NAVIGATION START | url={url[:100]} | candidates={candidates}")


def log_navigation_end(logger: logging.Logger, session_id: int, outcome: str, url: Optional[str] = None):
    """Log the terminal outcome of a navigation entry with standard format."""
    target = f" | target={url[:100]}" if url else ""
    logger.info(f"[tab {session_id}] NAVIGATION END | {outcome}{target}")

