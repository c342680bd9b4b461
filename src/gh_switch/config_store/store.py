"""Configuration Store for gh-switch profiles.

Handles:
- Reading/writing the JSON config document
- Strict schema validation on load
- Atomic saves (temp file + rename)
- Transactional profile mutations (load -> mutate -> save)

No state is cached between calls: every mutation re-reads the file, so a
fresh CLI process always sees the latest document. There is no file
locking; two concurrent invocations are last-writer-wins.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..config.paths import SwitchPaths
from ..config.schema import ConfigDocument, Profile
from ..errors import CorruptConfigError

logger = logging.getLogger(__name__)


class ConfigStore:
    """
    Manages the profile store at ~/.gh-switch/config.json.

    Directory structure:
        ~/.gh-switch/
        ├── config.json       # Profiles + active profile pointer
        └── gh-switch.log     # Rotating debug log
    """

    def __init__(self, paths: Optional[SwitchPaths] = None):
        """
        Initialize the config store.

        Args:
            paths: Filesystem context (default: derived from the environment)
        """
        self.paths = paths or SwitchPaths.from_env()

    @property
    def config_path(self) -> Path:
        return self.paths.config_path

    def exists(self) -> bool:
        return self.config_path.exists()

    # === Load / Save ===

    def load(self) -> ConfigDocument:
        """
        Load the config document.

        Returns a fresh empty document if the file does not exist.

        Raises:
            CorruptConfigError: If the file is not valid JSON or violates the schema
            OSError: If the file exists but cannot be read
        """
        if not self.config_path.exists():
            logger.debug(f"No config at {self.config_path}, starting empty")
            return ConfigDocument()

        raw = self.config_path.read_bytes()

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptConfigError(
                f"Failed to load configuration {self.config_path}: {e}"
            ) from e

        doc = ConfigDocument.from_dict(data)
        logger.debug(f"Loaded {len(doc.profiles)} profile(s) from {self.config_path}")
        return doc

    def save(self, doc: ConfigDocument) -> None:
        """
        Persist the document atomically.

        The JSON is written to a temp file in the same directory and then
        renamed over the target, so a reader never sees a partial file.
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(doc.to_dict(), indent=2, ensure_ascii=False) + "\n"

        fd, tmp_name = tempfile.mkstemp(
            prefix=".config-", suffix=".tmp", dir=self.config_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.config_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Saved {len(doc.profiles)} profile(s) to {self.config_path}")

    # === Transactional mutations ===

    def add_profile(self, profile: Profile) -> ConfigDocument:
        """Add or replace a profile by name."""
        doc = self.load()
        doc.add_or_update_profile(profile)
        self.save(doc)
        logger.info(f"Saved profile {profile.name}")
        return doc

    def remove_profile(self, name: str) -> ConfigDocument:
        """Remove a profile by name. Raises NotFoundError if absent."""
        doc = self.load()
        doc.remove_profile(name)
        self.save(doc)
        logger.info(f"Removed profile {name} (active now: {doc.active_profile})")
        return doc

    def set_active(self, name: str) -> ConfigDocument:
        """Mark a profile as active. Raises NotFoundError if absent."""
        doc = self.load()
        doc.set_active(name)
        self.save(doc)
        logger.info(f"Active profile set to {name}")
        return doc

    # === Queries ===

    def get_profile(self, name: str) -> Optional[Profile]:
        return self.load().get(name)

    def list_profiles(self) -> list[Profile]:
        return self.load().profiles

    def get_active_profile(self) -> Optional[Profile]:
        return self.load().active

    def profile_exists(self, name: str) -> bool:
        return self.load().get(name) is not None

    def find_by_key_path(self, path: str, exclude: Optional[str] = None) -> Optional[Profile]:
        return self.load().find_by_key_path(path, exclude=exclude)
