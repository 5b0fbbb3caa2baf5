"""Pull request plugins: map PR lifecycle events onto one check run per commit.

    opened       create run → verify → finish
    reopened     get/create run → verify → finish, unless already completed
    edited       get/create run, reset to in progress → verify → finish
    synchronize  get/create run for the old head → verify → finish if needed,
                 then duplicate it onto the new head
    other        nothing

Whenever a run concludes (or is found) with failure, CheckFailedError is raised
after submitting, since the Actions job result ignores failing check runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from prverify_core.errors import CheckFailedError, EventPayloadError, PluginsFailedError, PRVerifyError
from prverify_core.events import EventAction, PREvent
from prverify_core.gh.check_run import COMPLETED, CheckRunStore
from prverify_core.verifier import FAILURE, VerificationOutcome, VerifyFn, run_verification

if TYPE_CHECKING:
    from github.CheckRun import CheckRun
    from github.Repository import Repository

logger = logging.getLogger(__name__)


def _stored_summary(check_run: CheckRun) -> str:
    output = check_run.output
    return (output.summary if output is not None else None) or ""


@dataclass
class PRPlugin:
    """One named check run, driven by one verification function."""

    name: str
    title: str
    verify: VerifyFn
    logger: logging.Logger = field(default=logger, repr=False)

    def store_for(self, repo: Repository) -> CheckRunStore:
        return CheckRunStore(repo, self.name, self.title, logger=self.logger)

    def handle(self, event: PREvent, repo: Repository) -> None:
        """Process ``event`` against ``repo``.

        Raises CheckFailedError when the check failed, RemoteAPIError when the
        Checks API could not be reached or gave an ambiguous answer.
        """
        handlers: dict[EventAction, Callable[[CheckRunStore, PREvent], None]] = {
            EventAction.OPENED: self._on_open,
            EventAction.REOPENED: self._on_reopen,
            EventAction.EDITED: self._on_edit,
            EventAction.SYNCHRONIZE: self._on_sync,
            EventAction.OTHER: self._on_other,
        }
        self.logger.info("%s: handling %r event for PR #%s", self.name, event.raw_action, event.pull_request.number)
        handlers[event.action](self.store_for(repo), event)

    # ------------------------------------------------------------------ #
    # Shared steps                                                         #
    # ------------------------------------------------------------------ #

    def _verify_and_finish(
        self, store: CheckRunStore, event: PREvent, check_run: CheckRun
    ) -> tuple[CheckRun, VerificationOutcome]:
        outcome = run_verification(self.verify, event.pull_request, logger=self.logger)
        check_run = store.finish(check_run, outcome.conclusion, outcome.summary, outcome.text)
        return check_run, outcome

    def _process_and_submit(self, store: CheckRunStore, event: PREvent, check_run: CheckRun) -> CheckRun:
        check_run, outcome = self._verify_and_finish(store, event, check_run)
        if outcome.failed:
            raise CheckFailedError(outcome.summary, check_run) from outcome.error
        return check_run

    # ------------------------------------------------------------------ #
    # Transitions                                                          #
    # ------------------------------------------------------------------ #

    def _on_open(self, store: CheckRunStore, event: PREvent) -> None:
        check_run = store.create(event.pull_request.head_sha)
        self._process_and_submit(store, event, check_run)

    def _on_reopen(self, store: CheckRunStore, event: PREvent) -> None:
        check_run = store.get_or_create(event.pull_request.head_sha)

        if check_run.status != COMPLETED:
            self._process_and_submit(store, event, check_run)
            return

        if check_run.conclusion == FAILURE:
            raise CheckFailedError(_stored_summary(check_run), check_run)

    def _on_edit(self, store: CheckRunStore, event: PREvent) -> None:
        check_run = store.reset_if_needed(event.pull_request.head_sha)
        self._process_and_submit(store, event, check_run)

    def _on_sync(self, store: CheckRunStore, event: PREvent) -> None:
        before, after = event.before, event.after
        if not before or not after:
            raise EventPayloadError("synchronize event is missing the before or after commit SHA")
        if before == after:
            raise EventPayloadError(f"synchronize event does not move the head (before == after == {after})")

        check_run = store.get_or_create(before)
        outcome = None
        if check_run.status != COMPLETED:
            check_run, outcome = self._verify_and_finish(store, event, check_run)

        # The old commit keeps its record; the new head gets a copy.
        duplicate = store.duplicate(check_run, after)

        if duplicate.conclusion == FAILURE:
            cause = outcome.error if outcome is not None else None
            raise CheckFailedError(_stored_summary(duplicate), duplicate) from cause

    def _on_other(self, store: CheckRunStore, event: PREvent) -> None:
        self.logger.debug("%s: ignoring %r event", self.name, event.raw_action)


def run_plugins(
    plugins: list[PRPlugin],
    event: PREvent,
    repo: Repository,
    logger: logging.Logger | None = None,
) -> None:
    """Run every plugin on ``event``, then raise if any of them failed.

    A failing plugin does not stop the others. One failure is re-raised as is;
    several are wrapped in PluginsFailedError.
    """
    log = logger or logging.getLogger(__name__)
    errors: list[PRVerifyError] = []

    for plugin in plugins:
        try:
            plugin.handle(event, repo)
        except PRVerifyError as e:
            log.error("%s: %s", plugin.name, e)
            errors.append(e)

    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise PluginsFailedError(errors)
