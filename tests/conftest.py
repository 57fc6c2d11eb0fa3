"""Shared pytest fixtures for gpt-review tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest


def make_gh_comment(id_, body, login, minute=0):
    """Mock PyGithub IssueComment."""
    comment = MagicMock()
    comment.id = id_
    comment.body = body
    comment.user.login = login
    comment.html_url = f"https://github.com/octo/widgets/issues/42#issuecomment-{id_}"
    comment.created_at = datetime(2024, 1, 1, 10, minute, tzinfo=timezone.utc)
    return comment


@pytest.fixture
def sample_diff():
    """Unified diff touching a source file, a lockfile and build output."""
    return (
        "diff --git a/src/app.py b/src/app.py\n"
        "--- a/src/app.py\n"
        "+++ b/src/app.py\n"
        "@@ -1,2 +1,3 @@\n"
        " import os\n"
        "+import sys\n"
        " print('hi')\n"
        "diff --git a/yarn.lock b/yarn.lock\n"
        "--- a/yarn.lock\n"
        "+++ b/yarn.lock\n"
        "@@ -10,3 +10,3 @@\n"
        "-left-pad@1.0.0\n"
        "+left-pad@1.3.0\n"
        "diff --git a/dist/bundle.js b/dist/bundle.js\n"
        "--- a/dist/bundle.js\n"
        "+++ b/dist/bundle.js\n"
        "@@ -1 +1 @@\n"
        "-var a=1;\n"
        "+var a=2;\n"
    )


@pytest.fixture
def sample_issue():
    """Mock GitHub issue object."""
    issue = MagicMock()
    issue.number = 42
    issue.title = "Crash when config file is missing"
    issue.body = "Running `widgets start` without a config file raises KeyError."
    issue.user.login = "octocat"
    issue.html_url = "https://github.com/octo/widgets/issues/42"
    issue.pull_request = None
    issue.get_comments.return_value = [
        make_gh_comment(1, "Can you share the traceback?", "maintainer", 0),
        make_gh_comment(2, "<!-- rs-gpt-review -->\nIt looks like a missing default.", "github-actions[bot]", 1),
        make_gh_comment(3, "@rs-gpt-review how would you fix it?", "octocat", 2),
        make_gh_comment(4, "Posted after the trigger", "someone", 3),
    ]

    posted = MagicMock()
    posted.body = "reply"
    posted.html_url = "https://github.com/octo/widgets/issues/42#issuecomment-99"
    issue.create_comment.return_value = posted
    return issue


@pytest.fixture
def sample_pr_issue(sample_issue):
    """Mock GitHub issue that is a pull request."""
    sample_issue.title = "Handle missing config file"
    sample_issue.body = "Falls back to defaults when no config exists."
    sample_issue.pull_request = MagicMock()
    return sample_issue


@pytest.fixture
def sample_pr():
    """Mock GitHub PR object with files."""
    pr = MagicMock()
    pr.number = 42
    files = []
    for name, patch in [
        ("src/app.py", "@@ -1,2 +1,3 @@\n import os\n+import sys\n print('hi')"),
        ("yarn.lock", "@@ -10,3 +10,3 @@\n-left-pad@1.0.0\n+left-pad@1.3.0"),
        ("assets/logo.png", None),
    ]:
        f = MagicMock()
        f.filename = name
        f.previous_filename = None
        f.patch = patch
        files.append(f)
    pr.get_files.return_value = files

    reply = MagicMock()
    reply.body = "review reply"
    reply.html_url = "https://github.com/octo/widgets/pull/42#discussion_r7"
    pr.create_review_comment_reply.return_value = reply
    return pr


@pytest.fixture
def mock_repo(sample_issue, sample_pr):
    """Mock GitHub repository object."""
    repo = MagicMock()
    repo.name = "widgets"
    repo.full_name = "octo/widgets"
    repo.get_issue.return_value = sample_issue
    repo.get_pull.return_value = sample_pr

    def mock_get_contents(path, **kwargs):
        if path == "README.md":
            content = MagicMock()
            content.decoded_content = b"# Widgets\n\nRun --model carefully."
            return content
        if path == "src":
            return [MagicMock(), MagicMock()]
        raise Exception("Not Found")

    repo.get_contents = MagicMock(side_effect=mock_get_contents)
    return repo


@pytest.fixture
def mock_github_client(mock_repo):
    """Mock GitHub client."""
    client = MagicMock()
    client.get_repo.return_value = mock_repo
    return client


@pytest.fixture
def issue_comment_event():
    """issue_comment event for a comment on a plain issue."""
    from gpt_review.utils.models import WebhookEvent

    return WebhookEvent(
        name="issue_comment",
        payload={
            "action": "created",
            "issue": {"number": 42, "title": "Crash when config file is missing"},
            "comment": {
                "id": 3,
                "body": "@rs-gpt-review how would you fix it?",
                "user": {"login": "octocat"},
                "html_url": "https://github.com/octo/widgets/issues/42#issuecomment-3",
            },
        },
    )


@pytest.fixture
def review_comment_event():
    """pull_request_review_comment event."""
    from gpt_review.utils.models import WebhookEvent

    return WebhookEvent(
        name="pull_request_review_comment",
        payload={
            "action": "created",
            "pull_request": {"number": 42},
            "comment": {
                "id": 7,
                "body": "@rs-gpt-review is this import needed?",
                "user": {"login": "octocat"},
                "diff_hunk": "@@ -1,2 +1,3 @@\n import os\n+import sys",
                "html_url": "https://github.com/octo/widgets/pull/42#discussion_r7",
            },
        },
    )


@pytest.fixture
def action_inputs():
    """Validated action inputs."""
    from gpt_review.utils.config import ActionInputs

    return ActionInputs(github_token="gh-token", openai_key="sk-test")
