import logging
import os

import pytest
from git import GitCommandError, Repo

from gh_recurse.core.git_client import CloneError, GitClient
from gh_recurse.core.types import RepositoryJob


def test_clone_uses_ssh_url_and_named_target(monkeypatch, tmp_path) -> None:
    calls = []
    monkeypatch.setattr(Repo, "clone_from", classmethod(lambda cls, url, to_path, **kw: calls.append((url, to_path, kw))))

    GitClient(str(tmp_path), {"GIT_TERMINAL_PROMPT": "0"}).clone(RepositoryJob("acme", "widgets"))

    url, to_path, kw = calls[0]
    assert url == "git@github.com:acme/widgets"
    assert to_path == os.path.join(str(tmp_path), "widgets")
    assert kw["env"] == {"GIT_TERMINAL_PROMPT": "0"}


def test_custom_host_and_user() -> None:
    git = GitClient(".", host="git.example.com", user="deploy")

    assert git.remote_url(RepositoryJob("acme", "widgets")) == "deploy@git.example.com:acme/widgets"


def _raise(stderr: str):
    def clone_from(cls, url, to_path, **kw):
        raise GitCommandError(["git", "clone", url, to_path], 128, stderr=stderr)

    return classmethod(clone_from)


def test_existing_destination_is_flagged(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(
        Repo, "clone_from", _raise("fatal: destination path 'widgets' already exists and is not an empty directory.")
    )
    job = RepositoryJob("acme", "widgets")

    with pytest.raises(CloneError) as info:
        GitClient(str(tmp_path)).clone(job)

    assert info.value.already_exists
    assert info.value.job == job


def test_other_git_failures_are_not_skips(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(Repo, "clone_from", _raise("git@github.com: Permission denied (publickey)."))

    with pytest.raises(CloneError) as info:
        GitClient(str(tmp_path)).clone(RepositoryJob("acme", "widgets"))

    assert not info.value.already_exists
    assert "Permission denied" in str(info.value)


def test_clone_failure_is_logged_at_debug(monkeypatch, tmp_path, caplog) -> None:
    monkeypatch.setattr(Repo, "clone_from", _raise("fatal: repository not found"))

    with caplog.at_level(logging.DEBUG, logger="gh_recurse.core.git_client"):
        with pytest.raises(CloneError):
            GitClient(str(tmp_path)).clone(RepositoryJob("acme", "widgets"))

    assert "git clone of acme/widgets exited 128" in caplog.text
