"""Filesystem locations used by gh-switch.

Everything that would otherwise come from ``Path.home()`` goes through a
``SwitchPaths`` instance, so tests can point the tool at a temp directory.

Environment Variables:
    GH_SWITCH_HOME: Override the home directory (default: the user's home)
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

CONFIG_DIR_NAME = ".gh-switch"
CONFIG_FILE_NAME = "config.json"


@dataclass(frozen=True)
class SwitchPaths:
    """Per-user locations for the config store and the SSH client config."""
    home: Path

    @classmethod
    def from_env(cls, home: Optional[Path] = None) -> "SwitchPaths":
        if home is None:
            override = os.environ.get("GH_SWITCH_HOME")
            home = Path(override) if override else Path.home()
        return cls(home=Path(home))

    @property
    def config_dir(self) -> Path:
        return self.home / CONFIG_DIR_NAME

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    @property
    def ssh_dir(self) -> Path:
        return self.home / ".ssh"

    @property
    def ssh_config_path(self) -> Path:
        return self.ssh_dir / "config"

    @property
    def log_file(self) -> Path:
        return self.config_dir / "gh-switch.log"
