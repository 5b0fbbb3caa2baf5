"""In-memory stand-ins for the PyGithub objects the check run store talks to."""

from __future__ import annotations

import itertools
import types

import pytest
from github import GithubException


class FakeCheckRun:
    def __init__(self, repo, id, name, head_sha, status="queued", conclusion=None, output=None, **fields):
        self._repo = repo
        self.id = id
        self.name = name
        self.head_sha = head_sha
        self.status = status
        self.conclusion = conclusion
        self.output = _output(output)
        self.started_at = fields.get("started_at")
        self.completed_at = fields.get("completed_at")
        self.external_id = fields.get("external_id")
        self.details_url = fields.get("details_url")
        self.edits = []

    def edit(self, **kwargs):
        self._repo._maybe_fail("edit")
        self.edits.append(kwargs)
        for key, value in kwargs.items():
            setattr(self, key, _output(value) if key == "output" else value)
        if kwargs.get("conclusion") is not None:
            self.status = "completed"


def _output(value):
    if value is None:
        return None
    return types.SimpleNamespace(title=value.get("title"), summary=value.get("summary"), text=value.get("text"))


class FakeCommit:
    def __init__(self, repo, sha):
        self._repo = repo
        self.sha = sha

    def get_check_runs(self, check_name=None):
        self._repo._maybe_fail("list")
        return [r for r in self._repo.runs if r.head_sha == self.sha and (check_name is None or r.name == check_name)]


class FakeRepo:
    full_name = "owner/repo"

    def __init__(self):
        self.runs: list[FakeCheckRun] = []
        self.create_calls: list[dict] = []
        self.fail_on: set[str] = set()
        self._ids = itertools.count(1)

    def _maybe_fail(self, operation):
        if operation in self.fail_on:
            raise GithubException(500, {"message": f"{operation} exploded"}, None)

    def add_run(self, name, head_sha, **fields) -> FakeCheckRun:
        run = FakeCheckRun(self, next(self._ids), name, head_sha, **fields)
        self.runs.append(run)
        return run

    def runs_for(self, sha, name=None):
        return [r for r in self.runs if r.head_sha == sha and (name is None or r.name == name)]

    def create_check_run(self, name, head_sha, **fields):
        self._maybe_fail("create")
        self.create_calls.append({"name": name, "head_sha": head_sha, **fields})
        return self.add_run(name, head_sha, **fields)

    def get_commit(self, sha):
        return FakeCommit(self, sha)


@pytest.fixture
def repo():
    return FakeRepo()
