"""System collaborator abstraction.

Everything gh-switch does outside its own files (git config, cloning,
SSH probes, key generation, launching an editor) goes through a
``SystemCollaborator``. Production code uses ``LocalSystem``; tests
substitute a fake so no real subprocess is ever started.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class GitIdentity:
    """A git user.name / user.email pair. Empty strings mean unset."""
    name: str = ""
    email: str = ""

    @property
    def is_set(self) -> bool:
        return bool(self.name and self.email)


@dataclass
class SSHProbeResult:
    """Outcome of ``ssh -T git@<host>``.

    GitHub closes the session with a non-zero status even on success, so
    ``success`` comes from the output text, never from the exit code.
    """
    success: bool
    message: str


@dataclass
class GeneratedKey:
    """A freshly generated key pair."""
    private_key_path: Path
    public_key_path: Path
    public_key: str


class SystemCollaborator(ABC):
    """Abstract interface to git, ssh, ssh-keygen and the user's editor."""

    @abstractmethod
    def is_git_installed(self) -> bool:
        """Check whether ``git`` can be executed."""
        pass

    @abstractmethod
    def get_global_identity(self) -> GitIdentity:
        """Read the global git user.name / user.email."""
        pass

    @abstractmethod
    def set_global_identity(self, name: str, email: str) -> None:
        """Set the global git identity. Raises SubprocessError on failure."""
        pass

    @abstractmethod
    def set_local_identity(self, repo_path: Path, name: str, email: str) -> None:
        """Set the identity of a single repository."""
        pass

    @abstractmethod
    def clone(self, url: str, dest: Optional[str] = None) -> Path:
        """Clone ``url`` and return the checkout directory."""
        pass

    @abstractmethod
    def test_ssh_connection(self, host: str) -> SSHProbeResult:
        """Probe GitHub through an SSH host alias. Never raises on auth failure."""
        pass

    @abstractmethod
    def generate_ssh_key(self, email: str, key_path: Path) -> GeneratedKey:
        """Generate an ed25519 key pair with an empty passphrase."""
        pass

    @abstractmethod
    def open_in_editor(self, path: Path) -> None:
        """Open a file in the user's editor and wait for it to exit."""
        pass
