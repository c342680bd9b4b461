"""Profile and config document schema.

The on-disk format is camelCase JSON:

    {
      "profiles": [
        {
          "name": "work",
          "gitName": "Jane Doe",
          "gitEmail": "jane@acme.com",
          "githubUsername": "jdoe-acme",
          "sshKeyPath": "/home/jane/.ssh/id_ed25519_work",
          "sshHost": "github.com-work"
        }
      ],
      "activeProfile": "work",
      "version": "1.0.0"
    }
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import CorruptConfigError, NotFoundError

CONFIG_VERSION = "1.0.0"

PROFILE_NAME_RE = re.compile(r"^[A-Za-z0-9_-]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# JSON key -> dataclass attribute
_PROFILE_FIELDS = {
    "name": "name",
    "gitName": "git_name",
    "gitEmail": "git_email",
    "githubUsername": "github_username",
    "sshKeyPath": "ssh_key_path",
    "sshHost": "ssh_host",
}


def slugify(name: str) -> str:
    """Lowercase and replace anything outside [a-z0-9-] with '-'."""
    return re.sub(r"[^a-z0-9-]", "-", name.lower())


def ssh_host_for(profile_name: str) -> str:
    """Derive the SSH host alias for a profile, e.g. github.com-work."""
    return f"github.com-{slugify(profile_name)}"


def is_valid_profile_name(name: str) -> bool:
    return bool(PROFILE_NAME_RE.match(name))


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def expand_tilde(path: str, home: Path) -> str:
    """Expand a leading ~ against the given home directory."""
    if path == "~":
        return str(home)
    if path.startswith("~/"):
        return str(home / path[2:])
    return path


@dataclass
class Profile:
    """One git/GitHub identity."""
    name: str
    git_name: str
    git_email: str
    github_username: str
    ssh_key_path: str
    ssh_host: str

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, attr) for key, attr in _PROFILE_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: Any) -> "Profile":
        """Strictly parse a profile record.

        Raises:
            CorruptConfigError: If the record is not an object or any
                field is missing or not a string.
        """
        if not isinstance(data, dict):
            raise CorruptConfigError(f"Profile entry must be an object, got {type(data).__name__}")

        values = {}
        for key, attr in _PROFILE_FIELDS.items():
            if key not in data:
                raise CorruptConfigError(f"Profile entry is missing required field '{key}'")
            value = data[key]
            if not isinstance(value, str):
                raise CorruptConfigError(
                    f"Profile field '{key}' must be a string, got {type(value).__name__}"
                )
            values[attr] = value

        return cls(**values)


@dataclass
class ConfigDocument:
    """The persisted store: ordered profiles plus an active-profile pointer."""
    profiles: list[Profile] = field(default_factory=list)
    active_profile: Optional[str] = None
    version: str = CONFIG_VERSION

    # === Lookups ===

    def get(self, name: str) -> Optional[Profile]:
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return None

    def require(self, name: str) -> Profile:
        profile = self.get(name)
        if profile is None:
            raise NotFoundError(f'Profile "{name}" not found')
        return profile

    def _index_of(self, name: str) -> int:
        for i, profile in enumerate(self.profiles):
            if profile.name == name:
                return i
        return -1

    @property
    def active(self) -> Optional[Profile]:
        if self.active_profile is None:
            return None
        return self.get(self.active_profile)

    def find_by_key_path(self, path: str, exclude: Optional[str] = None) -> Optional[Profile]:
        """Return the first profile using this SSH key, optionally skipping one name."""
        for profile in self.profiles:
            if profile.ssh_key_path == path and profile.name != exclude:
                return profile
        return None

    # === Mutations ===

    def add_or_update_profile(self, profile: Profile) -> None:
        """Replace a same-named profile in place, or append a new one.

        When the store ends up with exactly one profile, it becomes active.
        """
        index = self._index_of(profile.name)
        if index != -1:
            self.profiles[index] = profile
        else:
            self.profiles.append(profile)

        if len(self.profiles) == 1:
            self.active_profile = profile.name

    def remove_profile(self, name: str) -> Profile:
        """Remove a profile, moving activeness to the first remaining one."""
        index = self._index_of(name)
        if index == -1:
            raise NotFoundError(f'Profile "{name}" not found')

        removed = self.profiles.pop(index)

        if self.active_profile == name:
            self.active_profile = self.profiles[0].name if self.profiles else None

        return removed

    def set_active(self, name: str) -> None:
        self.require(name)
        self.active_profile = name

    # === Serialization ===

    def to_dict(self) -> dict[str, Any]:
        return {
            "profiles": [p.to_dict() for p in self.profiles],
            "activeProfile": self.active_profile,
            "version": self.version,
        }

    def to_yaml(self) -> str:
        """Human-readable rendering for the `config` command."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_dict(cls, data: Any) -> "ConfigDocument":
        """Strictly parse a config document.

        A missing ``version`` is treated as a pre-versioning file and
        migrated to the current version. Everything else must be present
        and well-typed.

        Raises:
            CorruptConfigError: On any schema violation.
        """
        if not isinstance(data, dict):
            raise CorruptConfigError(
                f"Config root must be an object, got {type(data).__name__}"
            )

        if "profiles" not in data:
            raise CorruptConfigError("Config is missing required field 'profiles'")
        raw_profiles = data["profiles"]
        if not isinstance(raw_profiles, list):
            raise CorruptConfigError("Config field 'profiles' must be a list")

        profiles = [Profile.from_dict(p) for p in raw_profiles]

        seen = set()
        for profile in profiles:
            if profile.name in seen:
                raise CorruptConfigError(f'Duplicate profile name "{profile.name}"')
            seen.add(profile.name)

        if "activeProfile" not in data:
            raise CorruptConfigError("Config is missing required field 'activeProfile'")
        active = data["activeProfile"]
        if active is not None and not isinstance(active, str):
            raise CorruptConfigError("Config field 'activeProfile' must be a string or null")
        if active is not None and active not in seen:
            raise CorruptConfigError(
                f'Active profile "{active}" does not match any configured profile'
            )

        version = data.get("version", CONFIG_VERSION)
        if not isinstance(version, str):
            raise CorruptConfigError("Config field 'version' must be a string")

        return cls(profiles=profiles, active_profile=active, version=version)
