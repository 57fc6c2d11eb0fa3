"""
Webhook event classification for gpt-review.

GitHub represents comments on pull requests as ``issue_comment`` events whose
issue carries a ``pull_request`` field, so the event name alone is not enough
to tell issues and pull requests apart. Everything downstream works from the
EventKind produced here instead of inspecting the payload again.

See:
- https://docs.github.com/en/actions/using-workflows/events-that-trigger-workflows
- https://docs.github.com/en/webhooks/webhook-events-and-payloads
"""

import json
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnresolvableEventError
from .models import WebhookEvent


class EventKind(str, Enum):
    """The kind of entity that triggered the workflow."""

    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST_COMMENT = "pull_request_comment"
    PULL_REQUEST_REVIEW_COMMENT = "pull_request_review_comment"
    UNKNOWN = "unknown"


COMMENT_KINDS = (
    EventKind.ISSUE_COMMENT,
    EventKind.PULL_REQUEST_COMMENT,
    EventKind.PULL_REQUEST_REVIEW_COMMENT,
)


class ResolvedEvent(BaseModel):
    """A classified event with its trigger entity and issue number."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind = Field(description="Classified event kind")
    trigger: Dict[str, Any] = Field(description="Issue, pull request or comment object")
    issue_number: int = Field(description="Issue or pull request number")

    @property
    def is_comment(self) -> bool:
        return self.kind in COMMENT_KINDS


def classify(event: WebhookEvent) -> EventKind:
    """Determine the kind of a webhook event."""
    payload = event.payload

    if event.name == "issues":
        return EventKind.ISSUE

    if event.name == "pull_request":
        return EventKind.PULL_REQUEST

    if event.name == "issue_comment":
        issue = payload.get("issue") or {}
        if issue.get("pull_request") is None:
            return EventKind.ISSUE_COMMENT
        return EventKind.PULL_REQUEST_COMMENT

    if event.name == "pull_request_review_comment" and payload.get("comment") is not None:
        return EventKind.PULL_REQUEST_REVIEW_COMMENT

    return EventKind.UNKNOWN


def get_trigger(event: WebhookEvent) -> Optional[Dict[str, Any]]:
    """Return the object whose body triggered the event, or None."""
    kind = classify(event)

    if kind == EventKind.ISSUE:
        return event.payload.get("issue")
    if kind == EventKind.PULL_REQUEST:
        return event.payload.get("pull_request")
    if kind in COMMENT_KINDS:
        return event.payload.get("comment")
    return None


def get_issue_number(event: WebhookEvent) -> int:
    """
    Return the issue or pull request number for the event.

    Raises:
        UnresolvableEventError: If the event is not an issue, pull request
            or comment event, or the payload lacks the number.
    """
    kind = classify(event)
    payload = event.payload

    if kind in (EventKind.ISSUE, EventKind.ISSUE_COMMENT, EventKind.PULL_REQUEST_COMMENT):
        parent = payload.get("issue") or {}
    elif kind in (EventKind.PULL_REQUEST, EventKind.PULL_REQUEST_REVIEW_COMMENT):
        parent = payload.get("pull_request") or {}
    else:
        raise UnresolvableEventError(
            f'Could not determine issue number from event "{event.name}"'
        )

    number = parent.get("number")
    if not isinstance(number, int):
        raise UnresolvableEventError(
            f'Event "{event.name}" payload has no issue number'
        )
    return number


def resolve_event(event: WebhookEvent) -> ResolvedEvent:
    """Classify an event once, raising if it carries no trigger or number."""
    kind = classify(event)
    trigger = get_trigger(event)
    if trigger is None:
        raise UnresolvableEventError(f'Event "{event.name}" has no trigger entity')
    return ResolvedEvent(kind=kind, trigger=trigger, issue_number=get_issue_number(event))


def is_mentioned(body: Optional[str], handle: str) -> bool:
    """Check whether a body mentions the handle (case-insensitive)."""
    if not body:
        return False
    return re.search(re.escape(handle), body, re.IGNORECASE) is not None


def load_event(
    event_name: Optional[str] = None, event_path: Optional[str] = None
) -> WebhookEvent:
    """
    Load the triggering event from the Actions runner environment.

    Reads GITHUB_EVENT_NAME and the JSON payload at GITHUB_EVENT_PATH.
    """
    event_name = event_name or os.environ.get("GITHUB_EVENT_NAME")
    if not event_name:
        raise ValueError("GITHUB_EVENT_NAME environment variable not set")

    event_path = event_path or os.environ.get("GITHUB_EVENT_PATH")
    payload: Dict[str, Any] = {}
    if event_path and Path(event_path).exists():
        with open(event_path) as f:
            payload = json.load(f)

    return WebhookEvent(name=event_name, payload=payload)
