"""SSH key credential shared by every clone.

The passphrase is read once, before any worker starts. ssh gets it through an
`SSH_ASKPASS` helper that echoes it back from the child's environment, so it
never lands on a command line or in a file.
"""

from __future__ import annotations

import logging
import os
import shlex
import stat
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import typer

from .constants import PASSPHRASE_ENV, SSH_USER

logger = logging.getLogger(__name__)

_ASKPASS_SCRIPT = f"""#!/bin/sh
printf '%s\\n' "${PASSPHRASE_ENV}"
"""


class CredentialError(RuntimeError):
    pass


@dataclass(frozen=True)
class SshKeyCredential:
    username: str
    private_key: Path
    public_key: Path
    passphrase: str = field(repr=False)

    def ssh_command(self, insecure: bool = False) -> str:
        cmd = ["ssh", "-i", str(self.private_key), "-o", "IdentitiesOnly=yes"]
        if insecure:
            cmd += ["-o", "StrictHostKeyChecking=no", "-o", "UserKnownHostsFile=/dev/null"]
        else:
            cmd += ["-o", "StrictHostKeyChecking=yes"]
        return " ".join(shlex.quote(c) for c in cmd)

    def git_env(self, askpass: Path, insecure: bool = False) -> dict[str, str]:
        """Environment handed to every `git clone` child process."""
        return {
            "GIT_SSH_COMMAND": self.ssh_command(insecure=insecure),
            "GIT_TERMINAL_PROMPT": "0",
            "SSH_ASKPASS": str(askpass),
            "SSH_ASKPASS_REQUIRE": "force",
            # older OpenSSH only consults SSH_ASKPASS when DISPLAY is set
            "DISPLAY": os.environ.get("DISPLAY", ":0"),
            PASSPHRASE_ENV: self.passphrase,
        }


def prompt_passphrase() -> str:
    return typer.prompt("Enter passphrase", hide_input=True, default="", show_default=False)


def load_credential(key_path: str | Path, passphrase: str, username: str = SSH_USER) -> SshKeyCredential:
    private_key = Path(key_path).expanduser()
    if not private_key.is_file():
        raise CredentialError(f"SSH private key not found: {private_key}")
    public_key = private_key.with_name(private_key.name + ".pub")
    if not public_key.is_file():
        logger.debug("No public key next to %s", private_key)
    return SshKeyCredential(
        username=username,
        private_key=private_key,
        public_key=public_key,
        passphrase=passphrase,
    )


@contextmanager
def askpass_helper() -> Iterator[Path]:
    """Write a private SSH_ASKPASS script for the lifetime of the block."""
    with tempfile.TemporaryDirectory(prefix="gh-recurse-") as tmp:
        script = Path(tmp) / "askpass.sh"
        script.write_text(_ASKPASS_SCRIPT)
        script.chmod(stat.S_IRWXU)
        yield script
