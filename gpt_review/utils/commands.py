"""
Comment commands for gpt-review.

Supported commands (anywhere in a comment mentioning @rs-gpt-review):
- '--help' - List all commands
- '--model <name>' - Use a different model for this reply
- '--prompts' - List the canned prompts
- '--prompt <n>' - Replace the flag with canned prompt n (1-indexed)
- '--exclude a,b' - Drop these files from the pull request diff
- '--include a,b' - Add these repository files to the prompt

Commands are parsed into ParsedCommand values and folded into a single
CommandOptions value; nothing here talks to GitHub.
"""

import math
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .diff_sanitizer import split_file_list
from .errors import PromptNotFoundError, UnknownCommandError


class Command(str, Enum):
    """The closed set of command tokens, in recognition order."""

    HELP = "--help"
    MODEL = "--model"
    PROMPTS = "--prompts"
    PROMPT = "--prompt"
    EXCLUDE = "--exclude"
    INCLUDE = "--include"


AVAILABLE_COMMANDS: List[str] = [c.value for c in Command]
VALUE_COMMANDS: List[str] = [
    Command.MODEL.value,
    Command.PROMPT.value,
    Command.EXCLUDE.value,
    Command.INCLUDE.value,
]

DEFAULT_PROMPTS = [
    "Explain the purpose of this pull-request",
    "Find code enhancement opportunities",
    "Write any missing unit tests",
    "Check the code for SOLID and best practices",
    "Check any security issues with the OWASP Top 10, find any potential security risks",
    "Document the code for this pull-request",
    "Make a code review, with focus on maintainability",
    "Make a code review, with focus on performance",
    "Make a code review, with focus on security",
]


class ParsedCommand(BaseModel):
    """A command found in a comment body."""

    model_config = ConfigDict(frozen=True)

    command: Command = Field(description="The command token")
    value: Optional[str] = Field(default=None, description="Value following the token")


class CommandOptions(BaseModel):
    """Everything the commands in one comment ask for."""

    body: str = Field(description="Comment body after canned prompt substitution")
    model_override: Optional[str] = Field(default=None, description="Model from --model")
    exclude_files: List[str] = Field(default_factory=list, description="Files from --exclude")
    include_files: List[str] = Field(default_factory=list, description="Files from --include")
    selected_prompt: Optional[str] = Field(default=None, description="Prompt from --prompt")
    show_help: bool = Field(default=False, description="--help was given")
    show_prompts: bool = Field(default=False, description="--prompts was given")

    @property
    def is_interactive(self) -> bool:
        """Help and prompt listings are answered without calling the model."""
        return self.show_help or self.show_prompts


# =============================================================================
# PARSING
# =============================================================================


def _value_after(text: str, command: Command) -> Optional[str]:
    """First whitespace-delimited token after '<command> ', or None."""
    marker = f"{command.value} "
    if marker not in text:
        return None
    tokens = text.split(marker, 1)[1].split()
    return tokens[0] if tokens else None


def _parse_flag(text: str, command: Command) -> ParsedCommand:
    return ParsedCommand(command=command)


def _parse_value(text: str, command: Command) -> ParsedCommand:
    return ParsedCommand(command=command, value=_value_after(text, command))


def _parse_optional_value(text: str, command: Command) -> Optional[ParsedCommand]:
    # '--prompt' is also a substring of '--prompts'; only emit with a value marker
    if f"{command.value} " not in text:
        return None
    return ParsedCommand(command=command, value=_value_after(text, command))


# Only --prompt may decline to emit a command, so parsers return Optional
_PARSERS: Dict[Command, Callable[[str, Command], Optional[ParsedCommand]]] = {
    Command.HELP: _parse_flag,
    Command.MODEL: _parse_value,
    Command.PROMPTS: _parse_flag,
    Command.PROMPT: _parse_optional_value,
    Command.EXCLUDE: _parse_value,
    Command.INCLUDE: _parse_value,
}

_missing = set(Command) - set(_PARSERS)
if _missing:
    raise UnknownCommandError(f"No parser for commands: {sorted(c.value for c in _missing)}")


def has_commands(text: str, known_commands: Sequence[str] = AVAILABLE_COMMANDS) -> bool:
    """Check whether any command token appears in the text."""
    return any(token in (text or "") for token in known_commands)


def parse_commands(
    text: str, known_commands: Sequence[str] = AVAILABLE_COMMANDS
) -> List[ParsedCommand]:
    """
    Parse the commands in a comment body.

    Commands are returned in ``known_commands`` order, not in order of
    appearance. Flags ('--help', '--prompts') have no value; value commands
    take the token after '<command> '.

    Raises:
        UnknownCommandError: If a token found in the text has no parser.

    Example:
        >>> parse_commands("@rs-gpt-review --model gpt-4")
        [ParsedCommand(command=<Command.MODEL: '--model'>, value='gpt-4')]
    """
    result = []
    for token in known_commands:
        if token not in text:
            continue
        try:
            command = Command(token)
        except ValueError:
            raise UnknownCommandError(f'Could not determine the command in "{text}"')

        parser = _PARSERS.get(command)
        if parser is None:
            raise UnknownCommandError(f'Could not determine the command in "{text}"')

        parsed = parser(text, command)
        if parsed is not None:
            result.append(parsed)
    return result


# =============================================================================
# APPLYING
# =============================================================================


def resolve_prompt_index(value: Optional[str]) -> int:
    """
    Turn a '--prompt' value into a 1-based index.

    Missing, non-numeric and zero values fall back to 1.

    Raises:
        PromptNotFoundError: If the value is numeric but not a valid index.
    """
    try:
        number = float(value) if value is not None else 0.0
    except ValueError:
        return 1
    if number == 0 or math.isnan(number):
        return 1
    if not number.is_integer() or not 1 <= number <= len(DEFAULT_PROMPTS):
        raise PromptNotFoundError(f"Prompt not available: {value}")
    return int(number)


def apply_commands(commands: Sequence[ParsedCommand], body: str) -> CommandOptions:
    """
    Fold parsed commands into a CommandOptions value.

    '--prompt <n>' is replaced in the body by the canned prompt text.

    Raises:
        PromptNotFoundError: If '--prompt' names a prompt that doesn't exist.
    """
    options = CommandOptions(body=body)

    for parsed in commands:
        command, value = parsed.command, parsed.value

        if command == Command.HELP:
            options.show_help = True
        elif command == Command.PROMPTS:
            options.show_prompts = True
        elif command == Command.MODEL:
            options.model_override = value or None
        elif command == Command.PROMPT:
            prompt = DEFAULT_PROMPTS[resolve_prompt_index(value) - 1]
            options.selected_prompt = prompt
            token = f"{command.value} {value}" if value else command.value
            options.body = options.body.replace(token, prompt, 1)
        elif command == Command.EXCLUDE:
            options.exclude_files.extend(split_file_list(value))
        elif command == Command.INCLUDE:
            options.include_files.extend(split_file_list(value))
        else:
            raise UnknownCommandError(f"Unhandled command: {command.value}")

    return options


# =============================================================================
# INTERACTIVE REPLIES
# =============================================================================


def build_help_message() -> str:
    """Markdown reply for '--help'."""
    lines = ["**Available commands (--help):**", ""]
    lines.append("1. `--help` - list all commands")
    lines.append("2. `--model <name>` - set the model to use (e.g. `--model gpt-4`)")
    lines.append("3. `--prompts` - list of useful prompts")
    lines.append("4. `--prompt <n>` - use a prompt from the list (e.g. `--prompt 1`)")
    lines.append(
        "5. `--exclude <files>` - comma-separated file names to exclude from the diff "
        "(e.g. `--exclude file1,file2`)"
    )
    lines.append(
        "6. `--include <files>` - comma-separated repository files to add to the prompt "
        "(e.g. `--include src/main.py,src/helper.py`)"
    )
    return "\n".join(lines)


def build_prompts_list_message() -> str:
    """Markdown reply for '--prompts'."""
    lines = ["**Available prompts (--prompts):**", ""]
    for i, prompt in enumerate(DEFAULT_PROMPTS, start=1):
        lines.append(f"{i}. {prompt}")
    return "\n".join(lines)
