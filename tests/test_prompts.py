"""Tests for prompt assembly."""

import pytest


@pytest.fixture
def issue_details():
    """Issue metadata as fetched from GitHub."""
    from gpt_review.utils.models import IssueDetails

    return IssueDetails(
        number=42,
        title="Crash when config file is missing",
        body="Running `widgets start` without a config file raises KeyError.",
        author="octocat",
        html_url="https://github.com/octo/widgets/issues/42",
    )


class TestIdentityBlock:
    """Tests for identity_block function."""

    def test_names_the_assistant(self):
        """A single system message with name and handle."""
        from gpt_review.utils.prompts import identity_block

        messages = identity_block("rs-gpt-review", "@rs-gpt-review")

        assert len(messages) == 1
        assert messages[0].role == "system"
        assert "rs-gpt-review" in messages[0].content
        assert "@rs-gpt-review" in messages[0].content


class TestIssueBlock:
    """Tests for issue_block and pull_request_block functions."""

    def test_describes_issue(self, issue_details):
        """Author, repository, number, title and body are included."""
        from gpt_review.utils.prompts import issue_block

        messages = issue_block("octo/widgets", issue_details)
        content = messages[0].content

        assert messages[0].role == "system"
        assert "created by octocat in repository octo/widgets" in content
        assert "Issue number: 42" in content
        assert "Issue title: `Crash when config file is missing`" in content
        assert "raises KeyError" in content

    def test_body_limited_to_tenth_of_budget(self, issue_details):
        """Long descriptions are cut to max_chars // 10."""
        from gpt_review.utils.prompts import issue_block

        details = issue_details.model_copy(update={"body": "x" * 500})
        content = issue_block("octo/widgets", details, max_chars=1000)[0].content

        assert "x" * 100 in content
        assert "x" * 101 not in content

    def test_pull_request_includes_diff(self, issue_details, sample_diff):
        """Pull requests get a second message with the diff."""
        from gpt_review.utils.prompts import pull_request_block

        details = issue_details.model_copy(update={"is_pull_request": True})
        messages = pull_request_block("octo/widgets", details, sample_diff)

        assert len(messages) == 2
        assert "Pull request number: 42" in messages[0].content
        assert messages[1].content == f"Git diff:\n{sample_diff}"


class TestCommentsBlock:
    """Tests for comments_block function."""

    def test_empty_thread(self):
        """No comments, no messages."""
        from gpt_review.utils.prompts import comments_block

        assert comments_block([]) == []

    def test_roles_follow_marker(self):
        """Bot replies are assistant turns, the rest are named user turns."""
        from gpt_review.utils.models import Comment
        from gpt_review.utils.prompts import comments_block

        comments = [
            Comment(id=1, body="Can you share the traceback?", author="maintainer"),
            Comment(
                id=2,
                body="<!-- rs-gpt-review -->\nIt looks like a missing default.",
                author="github-actions[bot]",
            ),
        ]
        messages = comments_block(comments)

        assert messages[0].role == "system"
        assert messages[1].role == "user"
        assert messages[1].name == "maintainer"
        assert messages[2].role == "assistant"
        assert messages[2].name is None
        assert messages[2].content == "It looks like a missing default."

    def test_author_names_are_escaped(self):
        """Logins are made safe as participant names."""
        from gpt_review.utils.models import Comment
        from gpt_review.utils.prompts import comments_block

        messages = comments_block([Comment(id=1, body="hi", author="dependabot[bot]")])
        assert messages[1].name == "dependabot_bot_"


class TestReviewCommentBlock:
    """Tests for review_comment_block function."""

    def test_hunk_then_comment(self):
        """The diff hunk precedes the user's comment."""
        from gpt_review.utils.prompts import review_comment_block

        messages = review_comment_block("@@ -1 +1 @@\n+import sys", "is this needed?")

        assert messages[0].role == "system"
        assert "+import sys" in messages[0].content
        assert messages[1].role == "user"
        assert messages[1].content == "is this needed?"


class TestFormatIncludedFiles:
    """Tests for format_included_files function."""

    def test_labels_each_file(self):
        """Each file is rendered in its own labelled code block."""
        from gpt_review.utils.prompts import format_included_files

        result = format_included_files({"a.py": "print(1)", "b.txt": "hello"})

        assert "File `a.py`:\n```\nprint(1)\n```" in result
        assert "File `b.txt`:\n```\nhello\n```" in result
        assert result.index("a.py") < result.index("b.txt")

    def test_no_files(self):
        """Empty input renders nothing."""
        from gpt_review.utils.prompts import format_included_files

        assert format_included_files({}) == ""


class TestAssemblePrompt:
    """Tests for assemble_prompt function."""

    def test_fixed_section_order(self, issue_details):
        """Identity, subject, comments, review comment, files."""
        from gpt_review.utils.models import Message
        from gpt_review.utils.prompts import assemble_prompt

        identity = [Message(role="system", content="identity")]
        subject = [Message(role="system", content="subject")]
        comments = [Message(role="user", content="comment")]
        review = [Message(role="user", content="review")]
        files = [Message(role="user", content="files")]

        prompt = assemble_prompt(identity, subject, comments, review, files)
        assert [m.content for m in prompt] == [
            "identity",
            "subject",
            "comment",
            "review",
            "files",
        ]

    def test_strips_commands_except_from_files(self):
        """Command tokens are removed from the thread, not from file content."""
        from gpt_review.utils.commands import AVAILABLE_COMMANDS, VALUE_COMMANDS
        from gpt_review.utils.models import Message
        from gpt_review.utils.prompts import assemble_prompt

        identity = [Message(role="system", content="identity")]
        subject = [Message(role="system", content="subject")]
        comments = [Message(role="user", content="@rs-gpt-review --model gpt-4o explain")]
        files = [Message(role="user", content="Run --model carefully.")]

        prompt = assemble_prompt(
            identity,
            subject,
            comments,
            file_content=files,
            known_commands=AVAILABLE_COMMANDS,
            valued_commands=VALUE_COMMANDS,
        )

        assert "--model" not in prompt[2].content
        assert "gpt-4o" not in prompt[2].content
        assert "explain" in prompt[2].content
        assert prompt[3].content == "Run --model carefully."

    def test_strips_command_values_from_diff(self, issue_details):
        """Command tokens in diff lines lose their value like in comments."""
        from gpt_review.utils.commands import AVAILABLE_COMMANDS, VALUE_COMMANDS
        from gpt_review.utils.models import Message
        from gpt_review.utils.prompts import assemble_prompt, pull_request_block

        diff = "diff --git a/run.sh b/run.sh\n+  run --model gpt-4 --fast\n"
        subject = pull_request_block("octo/widgets", issue_details, diff)

        prompt = assemble_prompt(
            [Message(role="system", content="identity")],
            subject,
            known_commands=AVAILABLE_COMMANDS,
            valued_commands=VALUE_COMMANDS,
        )

        assert prompt[2].content == "Git diff:\ndiff --git a/run.sh b/run.sh\n+  run  --fast\n"

    def test_minimal_prompt(self):
        """Only identity and subject are required."""
        from gpt_review.utils.models import Message
        from gpt_review.utils.prompts import assemble_prompt

        prompt = assemble_prompt(
            [Message(role="system", content="a")], [Message(role="system", content="b")]
        )
        assert len(prompt) == 2
