"""Utility modules for logging and SSH key housekeeping."""
from .logging_config import (
    setup_logging,
    timed,
    perf_logger,
)
from .keys import (
    DetectedKey,
    detect_ssh_keys,
    default_ssh_key,
    ssh_key_name,
    read_public_key,
    check_key_permissions,
    fix_key_permissions,
)

__all__ = [
    "setup_logging",
    "timed",
    "perf_logger",
    "DetectedKey",
    "detect_ssh_keys",
    "default_ssh_key",
    "ssh_key_name",
    "read_public_key",
    "check_key_permissions",
    "fix_key_permissions",
]
