"""Render managed SSH entries back into config text."""
from .schema import END_MARKER, START_MARKER, SSHHostEntry


def format_entry(entry: SSHHostEntry) -> str:
    """Render one Host stanza."""
    lines = [
        f"Host {entry.host}",
        f"  HostName {entry.hostname}",
        f"  User {entry.user}",
        f"  IdentityFile {entry.identity_file}",
    ]

    if entry.identities_only:
        lines.append("  IdentitiesOnly yes")

    return "\n".join(lines)


def render_config(foreign: str, entries: list[SSHHostEntry]) -> str:
    """
    Recombine foreign text with the managed entries.

    With no entries the markers are dropped and only the foreign text is
    returned.
    """
    if not entries:
        return f"{foreign}\n" if foreign else ""

    managed = "\n\n".join(format_entry(e) for e in entries)

    parts = []
    if foreign:
        parts.append(foreign)
    parts.extend([START_MARKER, managed, END_MARKER])

    return "\n\n".join(parts) + "\n"
