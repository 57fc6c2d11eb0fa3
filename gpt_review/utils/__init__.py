# gpt-review Utilities
# Re-exports for convenient imports from utils package
from .commands import Command, CommandOptions, apply_commands, parse_commands  # noqa: F401
from .diff_sanitizer import remove_occurrences, sanitize_diff  # noqa: F401
from .errors import GPTReviewError  # noqa: F401
from .errors import IncompleteCompletionError  # noqa: F401
from .errors import PromptNotFoundError  # noqa: F401
from .errors import UnknownCommandError  # noqa: F401
from .errors import UnresolvableEventError  # noqa: F401
from .escaping import escape_bot_marker, is_bot_authored, strip_bot_marker  # noqa: F401
from .events import EventKind, classify, get_issue_number, get_trigger  # noqa: F401
from .github_client import get_github_client, get_issue, get_repo  # noqa: F401
from .history import truncate_comments  # noqa: F401
from .llm_client import LLMResponse, generate_completion  # noqa: F401
from .models import Comment, IssueDetails, Message, WebhookEvent  # noqa: F401
