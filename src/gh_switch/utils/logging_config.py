"""Logging configuration for gh-switch.

Provides configurable logging with:
- File-based logging with rotation
- Console output (quiet by default so command output stays readable)
- A timing decorator for external tool calls

Environment Variables:
    GH_SWITCH_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
    GH_SWITCH_LOG_FILE: Path to log file (default: ~/.gh-switch/gh-switch.log)
    GH_SWITCH_LOG_MAX_SIZE: Max log file size in MB (default: 1)
    GH_SWITCH_LOG_BACKUPS: Number of backup files to keep (default: 3)

Usage:
    from gh_switch.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("ssh_probe")
    def test_connection(self, host):
        ...
"""
import functools
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("gh_switch.perf")


def get_log_level(verbose: bool = False) -> int:
    """Get console log level from environment."""
    if verbose:
        return logging.DEBUG
    level_str = os.environ.get("GH_SWITCH_LOG_LEVEL", "WARNING").upper()
    return getattr(logging, level_str, logging.WARNING)


def get_log_file(default: Optional[Path] = None) -> Path:
    """Get log file path from environment."""
    default_path = default or Path.home() / ".gh-switch" / "gh-switch.log"
    path_str = os.environ.get("GH_SWITCH_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (WARNING+ by default, DEBUG with verbose)
    - File handler with rotation (DEBUG level - captures everything)

    If the log directory cannot be created, logging falls back to the
    console only.
    """
    log_level = get_log_level(verbose)
    log_file = get_log_file(log_file)
    max_size_mb = int(os.environ.get("GH_SWITCH_LOG_MAX_SIZE", "1"))
    backup_count = int(os.environ.get("GH_SWITCH_LOG_BACKUPS", "3"))

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_format = logging.Formatter("%(levelname)s: %(message)s")

    root_logger = logging.getLogger("gh_switch")
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_format)
    root_logger.addHandler(console_handler)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
    except OSError as e:
        root_logger.warning(f"File logging disabled: {e}")
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(main_format)
        root_logger.addHandler(file_handler)

    root_logger.debug(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def timed(operation: str):
    """Decorator to log execution time of a function.

    Args:
        operation: Name of the operation (e.g., "clone", "ssh_probe")
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.debug(f"{operation:20s} | {elapsed:8.2f}ms | OK")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.debug(f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}")
                raise

        return wrapper

    return decorator
