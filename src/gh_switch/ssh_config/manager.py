"""Read-modify-write of the managed region in ~/.ssh/config.

Every write is preceded by a byte-for-byte copy of the current file to
``<path>.backup`` (overwriting the previous backup). Content outside the
markers is never reordered or edited.
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from ..config.paths import SwitchPaths
from ..errors import CorruptConfigError
from .generator import render_config
from .parser import parse_entries, split_config
from .schema import SSHHostEntry

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


class SSHConfigManager:
    """Owns the gh-switch managed entries of one SSH client config file."""

    def __init__(self, paths: Optional[SwitchPaths] = None):
        self.paths = paths or SwitchPaths.from_env()

    @property
    def config_path(self) -> Path:
        return self.paths.ssh_config_path

    @property
    def backup_path(self) -> Path:
        return self.config_path.with_name(self.config_path.name + BACKUP_SUFFIX)

    # === File I/O ===

    def read(self) -> str:
        """
        Return the config text, or an empty string if the file is absent.

        Raises:
            CorruptConfigError: If the file is not valid UTF-8
        """
        if not self.config_path.exists():
            return ""

        raw = self.config_path.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptConfigError(
                f"SSH config {self.config_path} is not valid UTF-8 "
                f"(byte {e.start}); refusing to rewrite it"
            ) from e

    def backup(self) -> Optional[Path]:
        """Copy the current config to <path>.backup if it exists."""
        if not self.config_path.exists():
            return None
        shutil.copy2(self.config_path, self.backup_path)
        logger.debug(f"Backed up {self.config_path} to {self.backup_path}")
        return self.backup_path

    def write(self, content: str) -> None:
        """
        Back up, then atomically replace the config with owner-only permissions.

        The new text goes to a temp file in ~/.ssh which is renamed over the
        config, so an interrupted write leaves the old file intact.
        """
        ssh_dir = self.config_path.parent
        if not ssh_dir.exists():
            ssh_dir.mkdir(parents=True, mode=0o700)

        self.backup()

        fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=ssh_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.config_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Wrote {len(content)} bytes to {self.config_path}")

    # === Queries ===

    def list_entries(self) -> list[SSHHostEntry]:
        _, managed = split_config(self.read())
        return parse_entries(managed)

    def get_entry(self, host: str) -> Optional[SSHHostEntry]:
        for entry in self.list_entries():
            if entry.host == host:
                return entry
        return None

    # === Mutations ===

    def upsert_entry(self, entry: SSHHostEntry) -> None:
        """
        Add or replace the entry for ``entry.host``.

        The replaced entry is removed from its old position and the new
        one is appended at the end of the managed region.
        """
        foreign, managed = split_config(self.read())
        entries = [e for e in parse_entries(managed) if e.host != entry.host]
        entries.append(entry)

        self.write(render_config(foreign, entries))
        logger.info(f"SSH config entry for {entry.host} written to {self.config_path}")

    def remove_entry(self, host: str) -> bool:
        """
        Remove the managed entry for ``host``.

        If it was the last managed entry, the markers are dropped as well.

        Returns:
            True if an entry was removed, False if there was nothing to remove
        """
        if not self.config_path.exists():
            return False

        foreign, managed = split_config(self.read())
        entries = parse_entries(managed)
        remaining = [e for e in entries if e.host != host]

        if len(remaining) == len(entries):
            logger.debug(f"No managed SSH entry for {host}")
            return False

        self.write(render_config(foreign, remaining))
        logger.info(f"SSH config entry for {host} removed from {self.config_path}")
        return True
