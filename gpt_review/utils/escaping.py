"""
Comment escaping for gpt-review.

Replies posted by the bot carry an invisible HTML comment marker so that,
when a later mention replays the thread to the model, the bot's own replies
are sent as assistant messages and human comments as user messages.
"""

import re
from typing import Iterable, List

from .models import Message

ASSISTANT_NAME = "rs-gpt-review"
BOT_MARKER = f"<!-- {ASSISTANT_NAME} -->"
_MARKER_PREFIX = f"{BOT_MARKER}\n"

# Chat APIs restrict participant names to ^[a-zA-Z0-9_-]{1,64}$
_NAME_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
MAX_NAME_LENGTH = 64


def escape_bot_marker(content: str) -> str:
    """Tag content as written by the bot."""
    return _MARKER_PREFIX + content


def is_bot_authored(content: str) -> bool:
    """Check whether content carries the bot marker."""
    return BOT_MARKER in (content or "")


def strip_bot_marker(content: str) -> str:
    """Remove the bot marker, the exact inverse of escape_bot_marker()."""
    if content.startswith(_MARKER_PREFIX):
        return content[len(_MARKER_PREFIX) :]
    return content.replace(BOT_MARKER, "")


def escape_author_handle(login: str) -> str:
    """Make a GitHub login usable as a chat message participant name."""
    name = _NAME_INVALID_CHARS.sub("_", (login or "").lstrip("@"))
    return name[:MAX_NAME_LENGTH] or "user"


def _command_pattern(command: str, takes_value: bool) -> "re.Pattern[str]":
    # Token must not run on into a longer token, e.g. --prompt vs --prompts
    pattern = re.escape(command) + r"(?![\w-])"
    if takes_value:
        pattern += r"(?:[ \t]+\S+)?"
    return re.compile(pattern)


def strip_command_tokens(
    messages: List[Message],
    known_commands: Iterable[str],
    valued_commands: Iterable[str] = (),
) -> List[Message]:
    """
    Remove command tokens from the content of every message.

    Commands listed in ``valued_commands`` also lose the value that follows
    them (``--model gpt-4`` disappears entirely). Returns new messages; the
    input list is not modified.
    """
    valued = set(valued_commands)
    patterns = [_command_pattern(c, c in valued) for c in known_commands]

    stripped = []
    for message in messages:
        content = message.content
        for pattern in patterns:
            content = pattern.sub("", content)
        stripped.append(message.model_copy(update={"content": content}))
    return stripped
