"""Profile schema and filesystem locations."""
from .schema import (
    CONFIG_VERSION,
    ConfigDocument,
    Profile,
    expand_tilde,
    is_valid_email,
    is_valid_profile_name,
    slugify,
    ssh_host_for,
)
from .paths import SwitchPaths

__all__ = [
    "CONFIG_VERSION",
    "ConfigDocument",
    "Profile",
    "SwitchPaths",
    "expand_tilde",
    "is_valid_email",
    "is_valid_profile_name",
    "slugify",
    "ssh_host_for",
]
