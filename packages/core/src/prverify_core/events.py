"""Pull request event records, parsed from GitHub Actions event payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from prverify_core.errors import EventPayloadError


class EventAction(Enum):
    OPENED = "opened"
    REOPENED = "reopened"
    EDITED = "edited"
    SYNCHRONIZE = "synchronize"
    OTHER = "other"

    @classmethod
    def parse(cls, action: str | None) -> EventAction:
        """Map a payload ``action`` string to an EventAction; unknown actions are OTHER."""
        for member in cls:
            if member is not cls.OTHER and member.value == action:
                return member
        return cls.OTHER


@dataclass(frozen=True)
class PullRequest:
    """The slice of a pull request that verification functions look at."""

    number: int
    title: str
    head_sha: str
    body: str = ""

    @classmethod
    def from_payload(cls, data: dict) -> PullRequest:
        return cls(
            number=int(data.get("number") or 0),
            title=data.get("title") or "",
            head_sha=(data.get("head") or {}).get("sha") or "",
            body=data.get("body") or "",
        )


@dataclass(frozen=True)
class PREvent:
    action: EventAction
    pull_request: PullRequest
    before: str | None = None  # synchronize only
    after: str | None = None  # synchronize only
    raw_action: str = field(default="", compare=False)

    @classmethod
    def from_payload(cls, payload: dict) -> PREvent:
        """Build an event from a ``pull_request`` webhook payload."""
        pr = payload.get("pull_request")
        if not isinstance(pr, dict):
            raise EventPayloadError("event payload has no pull_request object")

        raw_action = payload.get("action") or ""
        action = EventAction.parse(raw_action)
        before, after = payload.get("before"), payload.get("after")
        if action is EventAction.SYNCHRONIZE and not (before and after):
            raise EventPayloadError("synchronize payload must carry both before and after SHAs")

        return cls(
            action=action,
            pull_request=PullRequest.from_payload(pr),
            before=before,
            after=after,
            raw_action=raw_action,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> PREvent:
        """Load the payload GitHub Actions writes to $GITHUB_EVENT_PATH."""
        p = Path(path)
        try:
            payload = json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise EventPayloadError(f"Event payload not found: {path}")
        except json.JSONDecodeError as e:
            raise EventPayloadError(f"Event payload is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise EventPayloadError("event payload must be a JSON object")
        return cls.from_payload(payload)
