"""Services for the clone command."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable

import typer

from ...config.settings import Settings
from ...core.credentials import askpass_helper, load_credential, prompt_passphrase
from ...core.dispatcher import CloneDispatcher, DispatchReport
from ...core.git_client import GitClient
from ...core.github_client import GitHubClient
from ...core.types import RepoKind, RepositoryJob

logger = logging.getLogger(__name__)


def unique_jobs(jobs: Iterable[RepositoryJob]) -> list[RepositoryJob]:
    seen: set[str] = set()
    out: list[RepositoryJob] = []
    for job in jobs:
        if job.full_name in seen:
            continue
        seen.add(job.full_name)
        out.append(job)
    return out


def list_org_jobs(client: GitHubClient, org: str) -> list[RepositoryJob]:
    """All repositories, then forks listed separately; forks show up in both."""
    listed = client.list_repositories(org, RepoKind.all) + client.list_repositories(org, RepoKind.forks)
    jobs = unique_jobs(listed)
    if len(jobs) != len(listed):
        logger.debug("Dropped %d duplicate listings", len(listed) - len(jobs))
    return jobs


def clone_org(
    org: str,
    settings: Settings,
    *,
    prompt: Callable[[], str] | None = None,
) -> DispatchReport | None:
    """Clone every repository of `org` into settings.dest. Returns None when there is nothing to do."""
    client = GitHubClient(token=settings.github_oauth_token, api_base=settings.api_base)
    jobs = list_org_jobs(client, org)
    if not jobs:
        typer.echo("No repositories found (check org name / permissions).")
        return None

    os.makedirs(settings.dest, exist_ok=True)
    passphrase = (prompt or prompt_passphrase)()
    credential = load_credential(settings.ssh_key_path, passphrase, username=settings.ssh_user)
    if settings.insecure:
        logger.warning("Host key verification is disabled (--insecure); any remote host will be trusted")

    typer.echo(f"Found {len(jobs)} repositories. Cloning to '{settings.dest}' with {settings.concurrency} workers...")
    start = time.time()
    with askpass_helper() as askpass:
        git = GitClient(
            settings.dest,
            credential.git_env(askpass, insecure=settings.insecure),
            host=settings.clone_host,
            user=credential.username,
        )
        report = CloneDispatcher(git.clone, concurrency=settings.concurrency).run(jobs)
    secs = time.time() - start
    typer.echo(f"Done. cloned={len(report.cloned)}, skipped={len(report.skipped)} in {secs:.1f}s.")
    return report
