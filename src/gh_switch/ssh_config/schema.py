"""Schema for the gh-switch managed region of ~/.ssh/config."""
from dataclasses import dataclass

START_MARKER = "# --- gh-switch managed entries START ---"
END_MARKER = "# --- gh-switch managed entries END ---"

GITHUB_HOSTNAME = "github.com"
GITHUB_USER = "git"


@dataclass
class SSHHostEntry:
    """One Host stanza inside the managed region."""
    host: str
    hostname: str
    user: str
    identity_file: str
    identities_only: bool = False


def create_entry(ssh_host: str, ssh_key_path: str) -> SSHHostEntry:
    """Build the canonical entry for a profile's host alias and key."""
    return SSHHostEntry(
        host=ssh_host,
        hostname=GITHUB_HOSTNAME,
        user=GITHUB_USER,
        identity_file=ssh_key_path,
        identities_only=True,
    )
