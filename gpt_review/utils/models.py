"""Data models shared across the gpt-review pipeline."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class WebhookEvent(BaseModel):
    """The event that started the workflow run."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Event name, e.g. 'issue_comment'")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Raw webhook payload")


class Comment(BaseModel):
    """A comment on an issue or pull request."""

    model_config = ConfigDict(strict=True)

    id: int = Field(description="Comment ID")
    body: str = Field(default="", description="Markdown body")
    author: str = Field(default="unknown", description="Login of the comment author")
    html_url: Optional[str] = Field(default=None, description="Link to the comment")
    created_at: Optional[str] = Field(default=None, description="ISO timestamp")

    @classmethod
    def from_payload(cls, data: Dict[str, Any], body: Optional[str] = None) -> "Comment":
        """Build a Comment from a webhook comment object.

        ``body`` overrides the payload body (used after command rewriting).
        """
        user = data.get("user") or {}
        return cls(
            id=int(data.get("id") or 0),
            body=body if body is not None else (data.get("body") or ""),
            author=user.get("login") or "unknown",
            html_url=data.get("html_url"),
            created_at=data.get("created_at"),
        )


class IssueDetails(BaseModel):
    """Issue or pull request metadata used to build the prompt."""

    model_config = ConfigDict(strict=True)

    number: int = Field(description="Issue or pull request number")
    title: str = Field(description="Title")
    body: str = Field(default="", description="Description")
    author: str = Field(description="Login of the author")
    html_url: Optional[str] = Field(default=None, description="Link to the issue")
    is_pull_request: bool = Field(default=False, description="Whether this is a pull request")


class Message(BaseModel):
    """A single chat message in the prompt sequence."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Format for the chat completion API."""
        return self.model_dump(exclude_none=True)


def messages_to_dicts(messages: List[Message]) -> List[Dict[str, str]]:
    """Format a prompt for the chat completion API."""
    return [m.to_dict() for m in messages]
