"""SSH connectivity probe and key generation."""
import logging
import subprocess
from pathlib import Path

from ..errors import SubprocessError, ValidationError
from ..utils.logging_config import timed
from .base import GeneratedKey, SSHProbeResult

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "successfully authenticated"
PROBE_TIMEOUT_SECONDS = 10


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def interpret_probe_output(stdout: str, stderr: str) -> SSHProbeResult:
    """
    Decide whether an ``ssh -T`` run authenticated.

    GitHub prints its greeting on stderr and exits 1 even on success, so
    the exit status is ignored and the combined output is searched instead.
    """
    combined = f"{stderr}\n{stdout}"
    message = stderr.strip() or stdout.strip() or "Connection failed"
    return SSHProbeResult(success=SUCCESS_MARKER in combined, message=message)


class SSHClient:
    """Runs ssh and ssh-keygen as subprocesses."""

    def __init__(
        self,
        ssh_binary: str = "ssh",
        keygen_binary: str = "ssh-keygen",
        timeout: float = PROBE_TIMEOUT_SECONDS,
    ):
        self.ssh_binary = ssh_binary
        self.keygen_binary = keygen_binary
        self.timeout = timeout

    @timed("ssh_probe")
    def test_connection(self, host: str) -> SSHProbeResult:
        """
        Run ``ssh -T git@<host>`` with a bounded wait.

        A timeout is reported as a failed probe rather than raised.

        Raises:
            SubprocessError: If the ssh client is not installed
        """
        cmd = [self.ssh_binary, "-T", f"git@{host}", "-o", "StrictHostKeyChecking=no"]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except FileNotFoundError as e:
            raise SubprocessError(
                "ssh is not installed or not on PATH", command=cmd
            ) from e
        except subprocess.TimeoutExpired as e:
            logger.warning(f"SSH probe to {host} timed out after {self.timeout}s")
            partial = interpret_probe_output(_as_text(e.stdout), _as_text(e.stderr))
            if partial.success:
                return partial
            return SSHProbeResult(
                success=False,
                message=f"Connection timed out after {self.timeout:g}s",
            )

        probe = interpret_probe_output(result.stdout, result.stderr)
        logger.debug(
            f"SSH probe to {host}: exit={result.returncode} success={probe.success}"
        )
        return probe

    def generate_key(self, email: str, key_path: Path) -> GeneratedKey:
        """
        Generate an ed25519 key pair with an empty passphrase.

        Raises:
            ValidationError: If a key already exists at ``key_path``
            SubprocessError: If ssh-keygen is missing or fails
        """
        if key_path.exists():
            raise ValidationError(
                f"SSH key already exists at {key_path}",
                hint="Choose a different profile name or reuse the existing key.",
            )

        key_path.parent.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.keygen_binary,
            "-t", "ed25519",
            "-C", email,
            "-f", str(key_path),
            "-N", "",
        ]
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise SubprocessError(
                "ssh-keygen is not installed or not on PATH", command=cmd
            ) from e

        if result.returncode != 0:
            raise SubprocessError(
                f"Failed to generate SSH key: {result.stderr.strip()}",
                command=cmd,
                returncode=result.returncode,
                stderr=result.stderr,
            )

        public_key_path = Path(f"{key_path}.pub")
        try:
            public_key = public_key_path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise SubprocessError(
                f"ssh-keygen did not produce {public_key_path}", command=cmd
            ) from e

        logger.info(f"Generated SSH key {key_path}")
        return GeneratedKey(
            private_key_path=key_path,
            public_key_path=public_key_path,
            public_key=public_key,
        )
