"""
Action inputs for gpt-review.

The Actions runner passes each `with:` input of action.yml as an environment
variable named INPUT_<NAME>, e.g. `openai_key` becomes INPUT_OPENAI_KEY.
"""

import os
from typing import Callable, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .diff_sanitizer import split_file_list

T = TypeVar("T")


class ActionInputs(BaseModel):
    """Validated inputs of the action."""

    model_config = ConfigDict(strict=True, frozen=True)

    github_token: str = Field(min_length=1, description="Token for the GitHub API")
    openai_key: str = Field(min_length=1, description="API key for the completion endpoint")
    openai_temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    openai_top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    openai_max_tokens: Optional[int] = Field(default=None, gt=0)
    model: Optional[str] = Field(default=None, description="Model to use by default")
    files_excluded: List[str] = Field(
        default_factory=list, description="Extra files to strip from diffs"
    )


def get_input(name: str, required: bool = False, fallback_env: Optional[str] = None) -> str:
    """
    Read an action input from the environment.

    Raises:
        ValueError: If a required input is missing or blank
    """
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    if not value and fallback_env:
        value = os.environ.get(fallback_env, "").strip()
    if required and not value:
        raise ValueError(f"Input required and not supplied: {name}")
    return value


def _parse_optional(raw: str, parse: Callable[[str], T], name: str) -> Optional[T]:
    if not raw:
        return None
    try:
        return parse(raw)
    except ValueError:
        raise ValueError(f"Input '{name}' is not a valid number: {raw!r}") from None


def load_inputs() -> ActionInputs:
    """Load and validate all action inputs."""
    return ActionInputs(
        github_token=get_input("github_token", required=True, fallback_env="GITHUB_TOKEN"),
        openai_key=get_input("openai_key", required=True, fallback_env="OPENAI_API_KEY"),
        openai_temperature=_parse_optional(
            get_input("openai_temperature"), float, "openai_temperature"
        ),
        openai_top_p=_parse_optional(get_input("openai_top_p"), float, "openai_top_p"),
        openai_max_tokens=_parse_optional(
            get_input("openai_max_tokens"), int, "openai_max_tokens"
        ),
        model=get_input("model") or None,
        files_excluded=split_file_list(get_input("files_excluded")),
    )
