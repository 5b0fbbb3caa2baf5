"""Run a verification function and turn its result into a check run conclusion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from prverify_core.errors import VerificationFailure

if TYPE_CHECKING:
    from prverify_core.events import PullRequest

SUCCESS = "success"
FAILURE = "failure"

VerifyFn = Callable[["PullRequest"], str]


@dataclass(frozen=True)
class VerificationOutcome:
    conclusion: str  # "success" | "failure"
    summary: str
    text: str
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def run_verification(
    verify_fn: VerifyFn,
    pull_request: PullRequest,
    logger: logging.Logger | None = None,
) -> VerificationOutcome:
    """Call ``verify_fn`` on the pull request and normalize its result.

    A returned string is a success with that string as the body. A raised
    VerificationFailure is a failure summarized by its message; if the error
    carries help text, the help replaces the message in the body only.
    Any other exception is also a failure, so the check run never stays in
    progress; it is logged with its traceback.
    """
    log = logger or logging.getLogger(__name__)

    try:
        text = verify_fn(pull_request)
    except VerificationFailure as e:
        summary = str(e)
        help_text = getattr(e, "help", None)
        outcome = VerificationOutcome(FAILURE, summary, help_text or summary, e)
    except Exception as e:
        log.error("verification function raised %s: %s", type(e).__name__, e, exc_info=True)
        summary = str(e) or type(e).__name__
        outcome = VerificationOutcome(FAILURE, summary, summary, e)
    else:
        outcome = VerificationOutcome(SUCCESS, "Success", text or "")

    # Logged here in case submitting the result fails afterwards.
    log.debug("plugin conclusion: %r", outcome.conclusion)
    log.debug("plugin result summary: %r", outcome.summary)
    log.debug("plugin result details: %r", outcome.text)

    return outcome
