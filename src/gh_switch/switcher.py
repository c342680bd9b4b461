"""Identity switch orchestration.

Ties the profile store, the SSH config manager and the system
collaborator together. Each public method corresponds to one CLI command
and leaves the store and SSH config consistent on success.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config.paths import SwitchPaths
from .config.schema import (
    Profile,
    expand_tilde,
    is_valid_email,
    is_valid_profile_name,
    ssh_host_for,
)
from .config_store import ConfigStore
from .errors import NotFoundError, SubprocessError, ValidationError
from .ssh_config import SSHConfigManager, create_entry
from .system.base import GeneratedKey, GitIdentity, SystemCollaborator
from .system.git import rewrite_git_url
from .utils.keys import ssh_key_name

logger = logging.getLogger(__name__)


@dataclass
class VerifyResult:
    """SSH verification outcome for one profile."""
    profile_name: str
    success: bool
    message: str


@dataclass
class CurrentStatus:
    """Active profile vs. the machine's global git identity."""
    active: Optional[Profile]
    git_identity: GitIdentity

    @property
    def in_sync(self) -> bool:
        if self.active is None or not self.git_identity.is_set:
            return True
        return (
            self.git_identity.name == self.active.git_name
            and self.git_identity.email == self.active.git_email
        )


@dataclass
class AddResult:
    """A saved profile plus the name of another profile sharing its key, if any."""
    profile: Profile
    key_conflict: Optional[str] = None


class IdentitySwitcher:
    """
    Applies and manages identity profiles.

    Usage:
        switcher = IdentitySwitcher(paths, LocalSystem())
        switcher.use("work")
    """

    def __init__(
        self,
        paths: SwitchPaths,
        system: SystemCollaborator,
        store: Optional[ConfigStore] = None,
        ssh_config: Optional[SSHConfigManager] = None,
    ):
        self.paths = paths
        self.system = system
        self.store = store or ConfigStore(paths)
        self.ssh_config = ssh_config or SSHConfigManager(paths)

    def require_git(self) -> None:
        if not self.system.is_git_installed():
            raise SubprocessError("Git is not installed. Please install Git and try again.")

    # === Profile construction ===

    def build_profile(
        self,
        name: str,
        git_name: str,
        git_email: str,
        github_username: str,
        ssh_key_path: str,
    ) -> Profile:
        """
        Validate raw input and build a Profile.

        Raises:
            ValidationError: With a corrective hint for the first bad field
        """
        name = name.strip()
        git_name = git_name.strip()
        git_email = git_email.strip()
        github_username = github_username.strip()
        ssh_key_path = ssh_key_path.strip()

        if not name:
            raise ValidationError("Profile name is required")
        if not is_valid_profile_name(name):
            raise ValidationError(
                f'Invalid profile name "{name}"',
                hint="Profile name can only contain letters, numbers, hyphens, and underscores",
            )
        if not git_name:
            raise ValidationError("Git user name is required")
        if not git_email:
            raise ValidationError("Git user email is required")
        if not is_valid_email(git_email):
            raise ValidationError(
                f'Invalid email "{git_email}"',
                hint="Please enter a valid email address, e.g. you@example.com",
            )
        if not github_username:
            raise ValidationError("GitHub username is required")
        if not ssh_key_path:
            raise ValidationError("SSH key path is required")

        key_path = expand_tilde(ssh_key_path, self.paths.home)
        if not Path(key_path).is_absolute():
            key_path = str(Path(key_path).resolve())
        if not Path(key_path).is_file():
            raise ValidationError(
                f"SSH key not found at {key_path}",
                hint="Pass the path of an existing private key, or generate a new one.",
            )

        return Profile(
            name=name,
            git_name=git_name,
            git_email=git_email,
            github_username=github_username,
            ssh_key_path=key_path,
            ssh_host=ssh_host_for(name),
        )

    def key_conflict(self, key_path: str, exclude: Optional[str] = None) -> Optional[str]:
        """Name of another profile already using ``key_path``, if any."""
        other = self.store.find_by_key_path(key_path, exclude=exclude)
        return other.name if other else None

    def generate_key(self, profile_name: str, email: str) -> GeneratedKey:
        """Generate ~/.ssh/id_ed25519_<slug> for a profile."""
        key_path = self.paths.ssh_dir / ssh_key_name(profile_name)
        return self.system.generate_ssh_key(email, key_path)

    # === Commands ===

    def add_profile(self, profile: Profile) -> AddResult:
        """
        Save a profile and its SSH host entry.

        A key shared with another profile is reported, not rejected.
        """
        conflict = self.key_conflict(profile.ssh_key_path, exclude=profile.name)
        if conflict:
            logger.warning(
                f'SSH key {profile.ssh_key_path} is already used by profile "{conflict}"'
            )

        self.ssh_config.upsert_entry(create_entry(profile.ssh_host, profile.ssh_key_path))
        self.store.add_profile(profile)

        return AddResult(profile=profile, key_conflict=conflict)

    def remove_profile(self, name: str) -> Profile:
        """Remove a profile and its SSH entry. The key file is left alone."""
        profile = self.store.get_profile(name)
        if profile is None:
            raise NotFoundError(f'Profile "{name}" not found')

        self.ssh_config.remove_entry(profile.ssh_host)
        self.store.remove_profile(name)
        return profile

    def use(self, name: str) -> Profile:
        """
        Make a profile the active identity.

        The global git identity is set first; the store's active pointer is
        only moved once that has succeeded.
        """
        doc = self.store.load()
        profile = doc.require(name)

        self.system.set_global_identity(profile.git_name, profile.git_email)

        doc.set_active(profile.name)
        self.store.save(doc)
        logger.info(f"Switched to profile {profile.name}")
        return profile

    def current(self) -> CurrentStatus:
        return CurrentStatus(
            active=self.store.get_active_profile(),
            git_identity=self.system.get_global_identity(),
        )

    def verify(self, name: Optional[str] = None) -> list[VerifyResult]:
        """Probe GitHub over SSH for one profile, or all of them."""
        doc = self.store.load()
        profiles = [doc.require(name)] if name else doc.profiles

        results = []
        for profile in profiles:
            probe = self.system.test_ssh_connection(profile.ssh_host)
            results.append(VerifyResult(
                profile_name=profile.name,
                success=probe.success,
                message=probe.message,
            ))
        return results

    def resolve_profile(self, name: Optional[str] = None) -> Profile:
        """The named profile, or the active one when no name is given."""
        doc = self.store.load()
        if name:
            return doc.require(name)
        if doc.active is None:
            raise NotFoundError('No active profile. Use "gh-switch use <profile>" first')
        return doc.active

    def clone(
        self,
        url: str,
        profile_name: Optional[str] = None,
        dest: Optional[str] = None,
    ) -> Path:
        """
        Clone through a profile's host alias and pin the repo's identity.

        Returns:
            Path of the new checkout
        """
        profile = self.resolve_profile(profile_name)
        rewritten = rewrite_git_url(url.strip(), profile.ssh_host)
        logger.debug(f"Clone URL {url} rewritten to {rewritten}")

        repo_path = self.system.clone(rewritten, dest)
        self.system.set_local_identity(repo_path, profile.git_name, profile.git_email)
        return repo_path
