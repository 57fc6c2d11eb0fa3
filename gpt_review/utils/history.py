"""Conversation history truncation under a character budget."""

from typing import List, Sequence

from .models import Comment, Message


def truncate_comments(
    comments: Sequence[Comment], already_used_chars: int, limit: int
) -> List[Comment]:
    """
    Keep the most recent comments that fit within ``limit`` characters.

    Comments are scanned newest first, starting from ``already_used_chars``.
    Scanning stops at the first comment that would push the total over the
    limit, so the result is always a contiguous suffix of ``comments`` in
    the original (chronological) order. Nothing is kept once
    ``already_used_chars`` reaches the limit, not even empty comments.

    Example:
        >>> comments = [Comment(id=1, body="First comment"),
        ...             Comment(id=2, body="Second comment"),
        ...             Comment(id=3, body="Third comment")]
        >>> [c.body for c in truncate_comments(comments, 0, 25)]
        ['Third comment']
    """
    if already_used_chars >= limit:
        return []

    total_chars = already_used_chars
    start = len(comments)

    for index in range(len(comments) - 1, -1, -1):
        comment_chars = len(comments[index].body)
        if total_chars + comment_chars > limit:
            break
        total_chars += comment_chars
        start = index

    return list(comments[start:])


def count_message_chars(messages: Sequence[Message]) -> int:
    """Total content characters of a prompt."""
    return sum(len(m.content) for m in messages)
