"""Shared fixtures: a temp home directory and a fake system collaborator."""
from pathlib import Path
from typing import Optional

import pytest

from gh_switch.config import Profile, SwitchPaths, ssh_host_for
from gh_switch.config_store import ConfigStore
from gh_switch.errors import SubprocessError
from gh_switch.ssh_config import SSHConfigManager
from gh_switch.switcher import IdentitySwitcher
from gh_switch.system.base import (
    GeneratedKey,
    GitIdentity,
    SSHProbeResult,
    SystemCollaborator,
)


class FakeSystem(SystemCollaborator):
    """In-memory stand-in for git/ssh/ssh-keygen. Records every call."""

    def __init__(self):
        self.git_installed = True
        self.global_identity = GitIdentity()
        self.local_identities: dict[Path, GitIdentity] = {}
        self.clones: list[tuple[str, Optional[str]]] = []
        self.probe_results: dict[str, SSHProbeResult] = {}
        self.probed: list[str] = []
        self.edited: list[Path] = []
        self.fail_set_global = False

    def is_git_installed(self) -> bool:
        return self.git_installed

    def get_global_identity(self) -> GitIdentity:
        return self.global_identity

    def set_global_identity(self, name: str, email: str) -> None:
        if self.fail_set_global:
            raise SubprocessError("Git command failed: could not lock config file")
        self.global_identity = GitIdentity(name=name, email=email)

    def set_local_identity(self, repo_path: Path, name: str, email: str) -> None:
        self.local_identities[repo_path] = GitIdentity(name=name, email=email)

    def clone(self, url: str, dest: Optional[str] = None) -> Path:
        self.clones.append((url, dest))
        return Path(dest or url.rsplit("/", 1)[-1].removesuffix(".git"))

    def test_ssh_connection(self, host: str) -> SSHProbeResult:
        self.probed.append(host)
        return self.probe_results.get(
            host, SSHProbeResult(success=False, message="Permission denied (publickey).")
        )

    def generate_ssh_key(self, email: str, key_path: Path) -> GeneratedKey:
        key_path.parent.mkdir(parents=True, exist_ok=True)
        key_path.write_text("PRIVATE KEY\n")
        key_path.chmod(0o600)
        pub = Path(f"{key_path}.pub")
        pub.write_text(f"ssh-ed25519 AAAAfake {email}\n")
        return GeneratedKey(
            private_key_path=key_path,
            public_key_path=pub,
            public_key=f"ssh-ed25519 AAAAfake {email}",
        )

    def open_in_editor(self, path: Path) -> None:
        self.edited.append(path)


@pytest.fixture
def paths(tmp_path):
    """SwitchPaths rooted at a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return SwitchPaths(home=home)


@pytest.fixture
def store(paths):
    return ConfigStore(paths)


@pytest.fixture
def ssh_manager(paths):
    return SSHConfigManager(paths)


@pytest.fixture
def fake_system():
    return FakeSystem()


@pytest.fixture
def switcher(paths, fake_system):
    return IdentitySwitcher(paths, fake_system)


@pytest.fixture
def make_key(paths):
    """Create a private key file in the temp ~/.ssh and return its path."""
    def _make(name: str = "id_ed25519", with_pub: bool = True) -> Path:
        paths.ssh_dir.mkdir(exist_ok=True)
        key = paths.ssh_dir / name
        key.write_text("PRIVATE KEY\n")
        key.chmod(0o600)
        if with_pub:
            Path(f"{key}.pub").write_text(f"ssh-ed25519 AAAA {name}\n")
        return key
    return _make


def make_profile(name: str, key_path: str = "", email: Optional[str] = None) -> Profile:
    """Build a Profile directly, bypassing input validation."""
    return Profile(
        name=name,
        git_name=f"{name.title()} User",
        git_email=email or f"{name}@example.com",
        github_username=f"{name}-gh",
        ssh_key_path=key_path or f"/keys/id_{name}",
        ssh_host=ssh_host_for(name),
    )
