"""Exception hierarchy for prverify.

Two families live here:
  - Infrastructure failures (RemoteAPIError, AmbiguousCheckRunError,
    EventPayloadError) abort the current event immediately.
  - Verification failures (VerificationFailure and its subclasses) are the
    expected "this PR failed the check" signal. They are always recorded on the
    check run first, then surfaced as CheckFailedError so the Actions job fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github.CheckRun import CheckRun


class PRVerifyError(Exception):
    """Base class for every error raised by prverify."""


class EventPayloadError(PRVerifyError):
    """The event payload could not be turned into a PREvent."""


class RemoteAPIError(PRVerifyError):
    """A call to the GitHub Checks API failed.

    ``check_run`` holds the best-known state of the run the call was operating
    on (None when nothing was read yet), so callers can decide whether to go on.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        repo: str,
        sha: str | None = None,
        name: str | None = None,
        check_run: CheckRun | None = None,
    ):
        self.operation = operation
        self.repo = repo
        self.sha = sha
        self.name = name
        self.check_run = check_run
        where = repo if sha is None else f"{repo} @ {sha}"
        super().__init__(f"{operation}: {message} ({where})")


class AmbiguousCheckRunError(RemoteAPIError):
    """More than one check run matches (repo, sha, name). Never auto-resolved."""

    def __init__(self, *, repo: str, sha: str, name: str, count: int):
        self.count = count
        super().__init__(
            f"multiple instances ({count}) of `{name}` check run found",
            operation="get check run",
            repo=repo,
            sha=sha,
            name=name,
        )


class VerificationFailure(PRVerifyError):
    """Raised by a verification function when the pull request fails the check.

    Subclasses may set ``help`` to a longer remediation message; it replaces the
    plain message in the check run body (the summary keeps ``str(self)``).
    """

    help: str | None = None


class CheckFailedError(PRVerifyError):
    """A check run concluded with failure.

    GitHub Actions ignores failing check runs when computing the job result, so
    this is raised after the run is submitted to fail the job as well.
    """

    def __init__(self, summary: str, check_run: CheckRun | None = None):
        self.summary = summary
        self.check_run = check_run
        super().__init__(f"failed: {summary}")


class PluginsFailedError(PRVerifyError):
    """Several plugins failed while handling the same event."""

    def __init__(self, errors: list[Exception]):
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"{len(errors)} plugins failed: {details}")
