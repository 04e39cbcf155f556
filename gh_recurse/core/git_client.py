"""Clone a single repository with GitPython."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from git import GitCommandError, Repo

from .constants import CLONE_HOST, DEST_EXISTS_MARKER, SSH_USER
from .types import RepositoryJob

logger = logging.getLogger(__name__)


class CloneError(RuntimeError):
    def __init__(self, job: RepositoryJob, message: str) -> None:
        super().__init__(message)
        self.job = job

    @property
    def already_exists(self) -> bool:
        return DEST_EXISTS_MARKER in str(self)


class GitClient:
    def __init__(
        self,
        dest: str,
        env: Mapping[str, str] | None = None,
        *,
        host: str = CLONE_HOST,
        user: str = SSH_USER,
    ) -> None:
        self.dest = dest
        self.env = dict(env or {})
        self.host = host
        self.user = user

    def remote_url(self, job: RepositoryJob) -> str:
        return f"{self.user}@{self.host}:{job.org}/{job.name}"

    def target_dir(self, job: RepositoryJob) -> str:
        return os.path.join(self.dest, job.name)

    def clone(self, job: RepositoryJob) -> None:
        """Clone `job` into dest/<name>. Raises CloneError on any git failure."""
        try:
            Repo.clone_from(self.remote_url(job), self.target_dir(job), env=self.env)
        except GitCommandError as e:
            logger.debug("git clone of %s exited %s", job.full_name, e.status)
            raise CloneError(job, str(e)) from e
