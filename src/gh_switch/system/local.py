"""Production system collaborator backed by real subprocesses."""
import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Optional

from ..errors import SubprocessError
from .base import GeneratedKey, GitIdentity, SSHProbeResult, SystemCollaborator
from .git import GitClient
from .ssh import SSHClient

logger = logging.getLogger(__name__)


def default_editor() -> str:
    """Editor from $EDITOR / $VISUAL, else a platform default."""
    editor = os.environ.get("EDITOR") or os.environ.get("VISUAL")
    if editor:
        return editor
    return "notepad" if sys.platform == "win32" else "nano"


class LocalSystem(SystemCollaborator):
    """Talks to the git, ssh and ssh-keygen binaries on this machine."""

    def __init__(self, git: Optional[GitClient] = None, ssh: Optional[SSHClient] = None):
        self.git = git or GitClient()
        self.ssh = ssh or SSHClient()

    def is_git_installed(self) -> bool:
        return self.git.is_installed()

    def get_global_identity(self) -> GitIdentity:
        return self.git.get_global_identity()

    def set_global_identity(self, name: str, email: str) -> None:
        self.git.set_global_identity(name, email)

    def set_local_identity(self, repo_path: Path, name: str, email: str) -> None:
        self.git.set_local_identity(repo_path, name, email)

    def clone(self, url: str, dest: Optional[str] = None) -> Path:
        return self.git.clone(url, dest)

    def test_ssh_connection(self, host: str) -> SSHProbeResult:
        return self.ssh.test_connection(host)

    def generate_ssh_key(self, email: str, key_path: Path) -> GeneratedKey:
        return self.ssh.generate_key(email, key_path)

    def open_in_editor(self, path: Path) -> None:
        editor = default_editor()
        # $EDITOR may carry arguments, e.g. "code --wait"
        cmd = shlex.split(editor) + [str(path)]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, check=False)
        except FileNotFoundError as e:
            raise SubprocessError(f"Editor not found: {editor}", command=cmd) from e

        if result.returncode != 0:
            raise SubprocessError(
                f"Editor exited with status {result.returncode}",
                command=cmd,
                returncode=result.returncode,
            )
