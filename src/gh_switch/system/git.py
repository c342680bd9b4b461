"""Git operations for identity switching and cloning.

Provides:
- Availability probe
- Global and per-repository user.name / user.email
- Clone with an SSH host alias
- GitHub URL rewriting
"""
import logging
import re
import subprocess
from pathlib import Path
from typing import Optional

from ..errors import SubprocessError
from ..utils.logging_config import timed
from .base import GitIdentity

logger = logging.getLogger(__name__)

_HTTPS_PREFIX = "https://github.com/"
_SSH_PREFIX = "git@github.com:"
_GIT_PREFIX = "git://github.com/"


def rewrite_git_url(url: str, ssh_host: str) -> str:
    """
    Rewrite a GitHub URL to go through an SSH host alias.

    Examples:
        https://github.com/acme/widget  -> git@github.com-work:acme/widget
        git@github.com:acme/widget.git  -> git@github.com-work:acme/widget.git
        git://github.com/acme/widget    -> git@github.com-work:acme/widget

    Anything else (including URLs already using an alias) is returned as-is.
    """
    if url.startswith(_HTTPS_PREFIX):
        return f"git@{ssh_host}:{url[len(_HTTPS_PREFIX):]}"

    if url.startswith(_SSH_PREFIX):
        return f"git@{ssh_host}:{url[len(_SSH_PREFIX):]}"

    if url.startswith(_GIT_PREFIX):
        return f"git@{ssh_host}:{url[len(_GIT_PREFIX):]}"

    return url


def repo_dir_name(url: str) -> str:
    """Directory name git clone would pick, e.g. 'widget' for .../widget.git."""
    match = re.search(r"[/:]([^/:]+?)(\.git)?/?$", url)
    return match.group(1) if match else ""


class GitClient:
    """Runs git commands as subprocesses."""

    def __init__(self, git_binary: str = "git"):
        self.git_binary = git_binary

    def _run_git(
        self,
        *args: str,
        cwd: Optional[Path] = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a git command, raising SubprocessError on failure."""
        cmd = [self.git_binary] + list(args)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                check=False,  # We'll handle errors ourselves
            )
        except FileNotFoundError as e:
            raise SubprocessError(
                "Git is not installed. Please install Git and try again.",
                command=cmd,
            ) from e

        if check and result.returncode != 0:
            logger.error(f"Git command failed: {result.stderr.strip()}")
            raise SubprocessError(
                f"Git command failed: {' '.join(cmd)}: {result.stderr.strip()}",
                command=cmd,
                returncode=result.returncode,
                stderr=result.stderr,
            )

        return result

    def is_installed(self) -> bool:
        try:
            result = self._run_git("--version", check=False)
        except SubprocessError:
            return False
        return result.returncode == 0

    def _get_global(self, key: str) -> str:
        # git exits 1 when the key is unset
        result = self._run_git("config", "--global", key, check=False)
        return result.stdout.strip() if result.returncode == 0 else ""

    def get_global_identity(self) -> GitIdentity:
        return GitIdentity(
            name=self._get_global("user.name"),
            email=self._get_global("user.email"),
        )

    def set_global_identity(self, name: str, email: str) -> None:
        self._run_git("config", "--global", "user.name", name)
        self._run_git("config", "--global", "user.email", email)
        logger.info(f"Global git identity set to {name} <{email}>")

    def set_local_identity(self, repo_path: Path, name: str, email: str) -> None:
        self._run_git("config", "user.name", name, cwd=repo_path)
        self._run_git("config", "user.email", email, cwd=repo_path)
        logger.info(f"Git identity for {repo_path} set to {name} <{email}>")

    @timed("git_clone")
    def clone(self, url: str, dest: Optional[str] = None, cwd: Optional[Path] = None) -> Path:
        """
        Clone a repository.

        Args:
            url: Repository URL (already rewritten to the host alias)
            dest: Target directory (default: derived from the URL)
            cwd: Directory to run the clone in (default: current directory)

        Returns:
            Path of the new checkout
        """
        args = ["clone", url]
        if dest:
            args.append(dest)
        self._run_git(*args, cwd=cwd)

        target = Path(dest) if dest else Path(repo_dir_name(url))
        if cwd is not None and not target.is_absolute():
            target = cwd / target
        logger.info(f"Cloned {url} into {target}")
        return target
