"""Parser for SSH client config text.

Splits a config file into the user-owned foreign text and the
marker-delimited managed region, then parses the managed region into
SSHHostEntry records.
"""
import logging
import re
from typing import Optional

from .schema import END_MARKER, START_MARKER, SSHHostEntry

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR_RE = re.compile(r"\n\s*\n")

# Directive prefix -> entry field. Case-sensitive, as written by OpenSSH users.
_DIRECTIVES = (
    ("Host ", "host"),
    ("HostName ", "hostname"),
    ("User ", "user"),
    ("IdentityFile ", "identity_file"),
)
_IDENTITIES_ONLY = "IdentitiesOnly "


def split_config(content: str) -> tuple[str, str]:
    """
    Split SSH config text into (foreign, managed).

    If either marker is missing, or END precedes START, the whole file is
    foreign and the managed region is empty. Whitespace is stripped at the
    join points only.

    Returns:
        Tuple of (foreign text, managed text)
    """
    start = content.find(START_MARKER)
    end = content.find(END_MARKER)

    if start == -1 or end == -1 or end < start:
        if start != -1 or end != -1:
            logger.debug("Unmatched gh-switch marker, treating whole file as foreign")
        return content.strip(), ""

    before = content[:start].strip()
    managed = content[start + len(START_MARKER):end].strip()
    after = content[end + len(END_MARKER):].strip()

    foreign = "\n\n".join(part for part in (before, after) if part)
    return foreign, managed


def parse_entries(managed: str) -> list[SSHHostEntry]:
    """
    Parse the managed region into entries.

    Blocks are separated by blank lines. A block missing Host, HostName,
    User or IdentityFile is dropped.
    """
    if not managed.strip():
        return []

    entries = []
    for block in BLOCK_SEPARATOR_RE.split(managed):
        entry = _parse_block(block)
        if entry is not None:
            entries.append(entry)

    return entries


def _parse_block(block: str) -> Optional[SSHHostEntry]:
    values: dict[str, str] = {}
    identities_only = False

    for line in block.strip().split("\n"):
        stripped = line.strip()
        for prefix, attr in _DIRECTIVES:
            if stripped.startswith(prefix):
                values[attr] = stripped[len(prefix):].strip()
                break
        else:
            if stripped.startswith(_IDENTITIES_ONLY):
                identities_only = stripped[len(_IDENTITIES_ONLY):].strip().lower() == "yes"

    if not all(values.get(attr) for _, attr in _DIRECTIVES):
        logger.debug(f"Dropping incomplete managed block: {block.strip()!r}")
        return None

    return SSHHostEntry(identities_only=identities_only, **values)
