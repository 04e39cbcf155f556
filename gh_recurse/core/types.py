"""Small types and Enums used by gh-recurse."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RepoKind(str, Enum):
    """Repository listing type passed to the GitHub API."""

    all = "all"
    forks = "forks"


class CloneOutcome(str, Enum):
    cloned = "cloned"
    skipped = "skipped"


@dataclass(frozen=True)
class RepositoryJob:
    """One repository to clone: owning organisation plus repository name."""

    org: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.name}"


class LogLevel(str, Enum):
    """Logging levels accepted by --log-level and the log_level setting."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
