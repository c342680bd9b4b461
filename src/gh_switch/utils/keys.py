"""SSH key discovery and housekeeping."""
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config.schema import slugify

logger = logging.getLogger(__name__)

KEY_NAME_RE = re.compile(r"^id_(rsa|ed25519|ecdsa|dsa)(_.+)?$")


@dataclass
class DetectedKey:
    """A private key found in the SSH directory."""
    path: Path
    name: str
    has_public_key: bool


def _sort_key(key: DetectedKey) -> tuple[int, str]:
    if key.name.startswith("id_ed25519"):
        rank = 0
    elif key.name.startswith("id_rsa"):
        rank = 1
    else:
        rank = 2
    return rank, key.name


def detect_ssh_keys(ssh_dir: Path) -> list[DetectedKey]:
    """
    Find private keys with conventional names in ``ssh_dir``.

    Ed25519 keys sort first, then RSA, then the rest by name. A missing or
    unreadable directory yields an empty list.
    """
    try:
        candidates = list(ssh_dir.iterdir())
    except OSError as e:
        logger.debug(f"Cannot scan {ssh_dir} for keys: {e}")
        return []

    keys = []
    for path in candidates:
        if path.name.endswith(".pub") or not KEY_NAME_RE.match(path.name):
            continue
        if not path.is_file():
            continue
        pub = path.with_name(path.name + ".pub")
        keys.append(DetectedKey(path=path, name=path.name, has_public_key=pub.exists()))

    return sorted(keys, key=_sort_key)


def default_ssh_key(keys: list[DetectedKey]) -> Optional[Path]:
    """Suggest a key: the first one with a .pub, else the first one."""
    for key in keys:
        if key.has_public_key:
            return key.path
    return keys[0].path if keys else None


def ssh_key_name(profile_name: str) -> str:
    """File name for a generated key, e.g. id_ed25519_work."""
    return f"id_ed25519_{slugify(profile_name)}"


def read_public_key(private_key_path: Path) -> Optional[str]:
    pub = Path(f"{private_key_path}.pub")
    try:
        return pub.read_text(encoding="utf-8").strip()
    except OSError:
        return None


def check_key_permissions(key_path: Path) -> bool:
    """True if the key is 0600 or 0400. Always True on Windows."""
    if sys.platform == "win32":
        return True
    try:
        mode = key_path.stat().st_mode & 0o777
    except OSError:
        return False
    return mode in (0o600, 0o400)


def fix_key_permissions(key_path: Path) -> None:
    if sys.platform == "win32":
        return
    key_path.chmod(0o600)
    logger.info(f"Set permissions of {key_path} to 600")
