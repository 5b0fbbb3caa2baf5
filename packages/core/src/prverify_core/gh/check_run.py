"""Check run operations on top of PyGithub's Checks API.

The API has no atomic upsert, so every mutating call is preceded by a read
that decides what to do. Duplicate matches are reported, never resolved.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import requests
from github import Github, GithubException

from prverify_core.errors import AmbiguousCheckRunError, RemoteAPIError

if TYPE_CHECKING:
    from github.CheckRun import CheckRun
    from github.Repository import Repository

IN_PROGRESS = "in_progress"
COMPLETED = "completed"


def get_repo(repo_name: str, token: str) -> Repository:
    try:
        return Github(token).get_repo(repo_name)
    except (GithubException, requests.RequestException) as e:
        raise RemoteAPIError(str(e), operation="get repository", repo=repo_name) from e


def _present(**fields) -> dict:
    """Drop unset fields so PyGithub omits them from the request body."""
    return {k: v for k, v in fields.items() if v is not None}


def output_of(check_run: CheckRun) -> dict | None:
    """Return the run's output as the dict PyGithub expects when creating a run."""
    output = check_run.output
    if output is None or output.title is None:
        return None
    return _present(title=output.title, summary=output.summary or "", text=output.text)


class CheckRunStore:
    """Create, look up, reset and finish the check run named ``name`` on ``repo``."""

    def __init__(self, repo: Repository, name: str, title: str, logger: logging.Logger | None = None):
        self.repo = repo
        self.name = name
        self.title = title
        self.log = logger or logging.getLogger(__name__)

    @contextmanager
    def _remote(self, operation: str, sha: str | None = None, check_run: CheckRun | None = None):
        try:
            yield
        except (GithubException, requests.RequestException) as e:
            raise RemoteAPIError(
                str(e),
                operation=operation,
                repo=self.repo.full_name,
                sha=sha,
                name=self.name,
                check_run=check_run,
            ) from e

    def create(self, sha: str) -> CheckRun:
        self.log.debug("creating check run %r on %s @ %s...", self.name, self.repo.full_name, sha)
        with self._remote("create check run", sha):
            check_run = self.repo.create_check_run(name=self.name, head_sha=sha, status=IN_PROGRESS)
        self.log.debug("created run: id=%s status=%s", check_run.id, check_run.status)
        return check_run

    def get_or_create(self, sha: str) -> CheckRun:
        """Return the single run for ``sha``, creating it when none exists.

        Raises AmbiguousCheckRunError when more than one run matches; duplicate
        records mean something else created them and must not be papered over.
        """
        self.log.debug("getting check run %r on %s @ %s...", self.name, self.repo.full_name, sha)
        with self._remote("list check runs", sha):
            runs = list(self.repo.get_commit(sha).get_check_runs(check_name=self.name))
        self.log.debug("listed %d run(s)", len(runs))

        if not runs:
            return self.create(sha)
        if len(runs) == 1:
            return runs[0]
        raise AmbiguousCheckRunError(repo=self.repo.full_name, sha=sha, name=self.name, count=len(runs))

    def reset_if_needed(self, sha: str) -> CheckRun:
        """Return the run for ``sha`` in the in-progress state."""
        check_run = self.get_or_create(sha)
        # freshly created runs are already in progress
        if check_run.status == IN_PROGRESS:
            return check_run

        self.log.debug("resetting check run %r on %s...", self.name, self.repo.full_name)
        with self._remote("reset check run", sha, check_run):
            check_run.edit(name=self.name, status=IN_PROGRESS)
        self.log.debug("reset run: id=%s status=%s", check_run.id, check_run.status)
        return check_run

    def finish(self, check_run: CheckRun, conclusion: str, summary: str, text: str) -> CheckRun:
        """Complete ``check_run`` with a conclusion and output. Updates it in place."""
        self.log.debug("finishing check run %r (id=%s) on %s...", self.name, check_run.id, self.repo.full_name)
        with self._remote("finish check run", check_run.head_sha, check_run):
            check_run.edit(
                name=self.name,
                conclusion=conclusion,
                completed_at=datetime.now(timezone.utc),
                output={"title": self.title, "summary": summary, "text": text},
            )
        self.log.debug("finished run: id=%s conclusion=%s", check_run.id, check_run.conclusion)
        return check_run

    def duplicate(self, source: CheckRun, sha: str) -> CheckRun:
        """Create a copy of ``source`` bound to commit ``sha``.

        Used when the PR head moves so each commit keeps its own record; the
        source run is left untouched.
        """
        self.log.debug(
            "duplicating check run %r (id=%s) onto %s @ %s...", self.name, source.id, self.repo.full_name, sha
        )
        fields = _present(
            details_url=source.details_url,
            external_id=source.external_id,
            status=source.status,
            conclusion=source.conclusion,
            started_at=source.started_at,
            completed_at=source.completed_at,
            output=output_of(source),
        )
        with self._remote("duplicate check run", sha):
            check_run = self.repo.create_check_run(name=self.name, head_sha=sha, **fields)
        self.log.debug("created duplicate: id=%s conclusion=%s", check_run.id, check_run.conclusion)
        return check_run
