import os
import shlex
import stat

import pytest

from gh_recurse.core.credentials import CredentialError, askpass_helper, load_credential


def test_load_credential_from_key_pair(ssh_key) -> None:
    cred = load_credential(ssh_key, "hunter2")

    assert cred.username == "git"
    assert cred.private_key == ssh_key
    assert cred.public_key == ssh_key.with_name("id_rsa.pub")
    assert "hunter2" not in repr(cred)


def test_load_credential_expands_home(ssh_key) -> None:
    assert load_credential("~/.ssh/id_rsa", "").private_key == ssh_key


def test_missing_private_key(tmp_path) -> None:
    with pytest.raises(CredentialError, match="not found"):
        load_credential(tmp_path / "nope", "pw")


def test_credential_is_immutable(ssh_key) -> None:
    cred = load_credential(ssh_key, "pw")

    with pytest.raises(AttributeError):
        cred.passphrase = "other"


def test_git_env_verifies_hosts_by_default(ssh_key, tmp_path) -> None:
    env = load_credential(ssh_key, "pw").git_env(tmp_path / "askpass.sh")

    ssh = shlex.split(env["GIT_SSH_COMMAND"])
    assert ssh[:3] == ["ssh", "-i", str(ssh_key)]
    assert "StrictHostKeyChecking=yes" in ssh
    assert "UserKnownHostsFile=/dev/null" not in ssh
    assert env["SSH_ASKPASS"] == str(tmp_path / "askpass.sh")
    assert env["SSH_ASKPASS_REQUIRE"] == "force"
    assert env["GH_RECURSE_SSH_PASSPHRASE"] == "pw"
    assert env["GIT_TERMINAL_PROMPT"] == "0"


def test_git_env_insecure_accepts_any_host(ssh_key, tmp_path) -> None:
    ssh = shlex.split(load_credential(ssh_key, "pw").git_env(tmp_path / "a", insecure=True)["GIT_SSH_COMMAND"])

    assert "StrictHostKeyChecking=no" in ssh
    assert "UserKnownHostsFile=/dev/null" in ssh


def test_askpass_helper_is_private_and_removed() -> None:
    with askpass_helper() as script:
        mode = script.stat().st_mode
        assert mode & stat.S_IXUSR
        assert not mode & (stat.S_IRWXG | stat.S_IRWXO)
        assert "$GH_RECURSE_SSH_PASSPHRASE" in script.read_text()
        assert script.read_text().startswith("#!/bin/sh")

    assert not os.path.exists(script)
