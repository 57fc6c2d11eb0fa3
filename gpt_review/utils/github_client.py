"""GitHub API utilities for gpt-review."""

import os
from typing import List, Optional

from github import Github

from .models import Comment, IssueDetails


def get_github_client(token: Optional[str] = None) -> Github:
    """Get authenticated GitHub client."""
    token = token or os.environ.get("GITHUB_TOKEN")
    if not token:
        raise ValueError("GITHUB_TOKEN environment variable not set")
    return Github(token)


def get_repo(gh: Github, repo_name: Optional[str] = None):
    """Get repository object."""
    repo_name = repo_name or os.environ.get("GITHUB_REPOSITORY")
    if not repo_name:
        raise ValueError("Repository name not provided")
    return gh.get_repo(repo_name)


def get_issue(repo, issue_number: int):
    """Get issue (or pull request, as an issue) by number."""
    return repo.get_issue(issue_number)


def get_pull_request(repo, pr_number: int):
    """Get PR by number."""
    return repo.get_pull(pr_number)


def to_issue_details(issue) -> IssueDetails:
    """Extract the fields the prompt needs from a PyGithub issue."""
    return IssueDetails(
        number=issue.number,
        title=issue.title or "",
        body=issue.body or "",
        author=issue.user.login if issue.user else "unknown",
        html_url=issue.html_url,
        is_pull_request=issue.pull_request is not None,
    )


def to_comment(c) -> Comment:
    """Convert a PyGithub comment into a Comment."""
    return Comment(
        id=c.id,
        body=c.body or "",
        author=c.user.login if c.user else "unknown",
        html_url=c.html_url,
        created_at=c.created_at.isoformat() if c.created_at else None,
    )


def get_issue_comments(issue) -> List[Comment]:
    """Get all comments on an issue, oldest first."""
    return [to_comment(c) for c in issue.get_comments()]


def list_comments_before(issue, comment_id: int) -> List[Comment]:
    """
    Get the comments posted before the given comment, oldest first.

    The workflow run may start after more comments were posted, so anything
    from the triggering comment onwards is dropped. If the comment is not
    found, all comments are returned.
    """
    comments = get_issue_comments(issue)
    for index, comment in enumerate(comments):
        if comment.id == comment_id:
            return comments[:index]
    return comments


def get_pull_request_diff(repo, pr_number: int) -> str:
    """
    Get the unified diff of a pull request.

    Rebuilt from the per-file patches; files without a patch (binary or
    too large) only contribute their header.
    """
    pr = get_pull_request(repo, pr_number)
    sections = []
    for f in pr.get_files():
        previous = f.previous_filename or f.filename
        header = (
            f"diff --git a/{previous} b/{f.filename}\n"
            f"--- a/{previous}\n"
            f"+++ b/{f.filename}"
        )
        sections.append(f"{header}\n{f.patch}" if f.patch else header)
    return "\n".join(sections)


def read_repo_file(repo, path: str, ref: Optional[str] = None) -> str:
    """
    Read a file from the repository.

    Raises:
        github.GithubException: If the file doesn't exist
        ValueError: If the path is a directory
    """
    kwargs = {"ref": ref} if ref else {}
    content = repo.get_contents(path, **kwargs)
    if isinstance(content, list):
        raise ValueError(f"'{path}' is a directory, not a file")
    return content.decoded_content.decode("utf-8")


def post_comment(issue, body: str):
    """Add a comment to an issue or pull request."""
    return issue.create_comment(body)


def post_review_reply(repo, pr_number: int, body: str, in_reply_to_id: int):
    """Reply to a pull request review comment."""
    pr = get_pull_request(repo, pr_number)
    return pr.create_review_comment_reply(in_reply_to_id, body)
