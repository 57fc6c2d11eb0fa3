"""Errors raised by the gpt-review pipeline.

All of them are fatal: they propagate to the action entry point, which
reports the failure and exits without posting a reply.
"""


class GPTReviewError(Exception):
    """Base class for gpt-review errors."""


class UnresolvableEventError(GPTReviewError):
    """The webhook event does not carry an issue or pull request number."""


class UnknownCommandError(GPTReviewError):
    """A command token matched but no handler exists for it."""


class PromptNotFoundError(GPTReviewError):
    """The requested canned prompt index is out of range."""


class IncompleteCompletionError(GPTReviewError):
    """The model response was truncated or empty."""
