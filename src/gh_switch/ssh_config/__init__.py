"""SSH client config merging.

gh-switch owns only the region between its two marker lines:

    # --- gh-switch managed entries START ---

    Host github.com-work
      HostName github.com
      User git
      IdentityFile ~/.ssh/id_ed25519_work
      IdentitiesOnly yes

    # --- gh-switch managed entries END ---

Usage:
    from gh_switch.ssh_config import SSHConfigManager, create_entry

    manager = SSHConfigManager(paths)
    manager.upsert_entry(create_entry("github.com-work", key_path))
"""

from .schema import (
    END_MARKER,
    START_MARKER,
    SSHHostEntry,
    create_entry,
)
from .parser import parse_entries, split_config
from .generator import format_entry, render_config
from .manager import SSHConfigManager

__all__ = [
    "END_MARKER",
    "START_MARKER",
    "SSHHostEntry",
    "create_entry",
    "parse_entries",
    "split_config",
    "format_entry",
    "render_config",
    "SSHConfigManager",
]
