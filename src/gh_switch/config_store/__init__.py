"""Configuration Store package for managing identity profiles.

This package provides:
- ConfigStore: Load/save the profile document and apply transactional mutations

Directory structure managed:
    ~/.gh-switch/
    └── config.json
"""

from .store import ConfigStore

__all__ = [
    "ConfigStore",
]
