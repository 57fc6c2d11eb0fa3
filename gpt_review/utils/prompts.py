"""
Prompt assembly for gpt-review.

The prompt reads from general to specific:

1. Who the assistant is
2. The issue or pull request (with its sanitized diff)
3. The comment thread, if a comment triggered the run
4. The review comment and its diff hunk, if a review comment triggered it
5. Repository files the user asked to include

Every builder returns a list of Message fragments; assemble_prompt() joins
them in that fixed order.
"""

from typing import Dict, Iterable, List, Sequence

from .escaping import (
    escape_author_handle,
    is_bot_authored,
    strip_bot_marker,
    strip_command_tokens,
)
from .llm_client import LLM_MAX_CHARS
from .models import Comment, IssueDetails, Message

CODE_FENCE = "```"


def identity_block(name: str, handle: str) -> List[Message]:
    return [
        Message(
            role="system",
            content="\n".join(
                [
                    "You are a helpful assistant for GitHub issues and pull requests.",
                    f"Your name is {name} and your handle is {handle}.",
                    "You respond to comments when someone mentions you.",
                ]
            ),
        )
    ]


def _describe(kind: str, repo_name: str, issue: IssueDetails, max_chars: int) -> Message:
    # The description gets at most a tenth of the prompt budget
    body = issue.body[: max_chars // 10]
    return Message(
        role="system",
        content="\n".join(
            [
                f"The current {kind} was created by {escape_author_handle(issue.author)} "
                f"in repository {repo_name}.",
                f"{kind.capitalize()} number: {issue.number}",
                f"{kind.capitalize()} title: `{issue.title}`",
                f"{kind.capitalize()} description:",
                CODE_FENCE,
                body,
                CODE_FENCE,
            ]
        ),
    )


def issue_block(
    repo_name: str, issue: IssueDetails, max_chars: int = LLM_MAX_CHARS
) -> List[Message]:
    return [_describe("issue", repo_name, issue, max_chars)]


def pull_request_block(
    repo_name: str, issue: IssueDetails, diff: str, max_chars: int = LLM_MAX_CHARS
) -> List[Message]:
    """Pull request metadata plus the diff, which is sanitized but not truncated here."""
    return [
        _describe("pull request", repo_name, issue, max_chars),
        Message(role="system", content="\n".join(["Git diff:", diff])),
    ]


def comments_block(comments: Sequence[Comment]) -> List[Message]:
    """
    The comment thread as chat turns.

    Comments carrying the bot marker become assistant messages; everything
    else is a user message named after its author.
    """
    if not comments:
        return []

    messages = [Message(role="system", content="Here are the comments:")]
    for comment in comments:
        if is_bot_authored(comment.body):
            messages.append(Message(role="assistant", content=strip_bot_marker(comment.body)))
        else:
            messages.append(
                Message(
                    role="user",
                    name=escape_author_handle(comment.author),
                    content=strip_bot_marker(comment.body),
                )
            )
    return messages


def review_comment_block(diff_hunk: str, body: str) -> List[Message]:
    return [
        Message(
            role="system",
            content="\n".join(
                ["The diff hunk where the comment was made:", CODE_FENCE, diff_hunk, CODE_FENCE]
            ),
        ),
        Message(role="user", content=strip_bot_marker(body)),
    ]


def file_content_block(content: str) -> List[Message]:
    return [Message(role="user", content=content)]


def format_included_files(files: Dict[str, str]) -> str:
    """Render repository files for file_content_block()."""
    parts = []
    for path, content in files.items():
        parts.append(f"File `{path}`:\n{CODE_FENCE}\n{content}\n{CODE_FENCE}")
    return "\n\n".join(parts)


def assemble_prompt(
    identity: List[Message],
    subject: List[Message],
    comments: Sequence[Message] = (),
    review_comment: Sequence[Message] = (),
    file_content: Sequence[Message] = (),
    known_commands: Iterable[str] = (),
    valued_commands: Iterable[str] = (),
) -> List[Message]:
    """
    Join prompt fragments in their fixed order.

    Command tokens are stripped from everything except the included files,
    which are passed through verbatim.
    """
    prompt = [*identity, *subject, *comments, *review_comment]
    prompt = strip_command_tokens(prompt, known_commands, valued_commands)
    prompt.extend(file_content)
    return prompt
