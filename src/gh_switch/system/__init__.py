"""External tool integration (git, ssh, ssh-keygen, editor)."""
from .base import GeneratedKey, GitIdentity, SSHProbeResult, SystemCollaborator
from .git import GitClient, repo_dir_name, rewrite_git_url
from .ssh import SSHClient, interpret_probe_output
from .local import LocalSystem

__all__ = [
    "GeneratedKey",
    "GitIdentity",
    "SSHProbeResult",
    "SystemCollaborator",
    "GitClient",
    "repo_dir_name",
    "rewrite_git_url",
    "SSHClient",
    "interpret_probe_output",
    "LocalSystem",
]
