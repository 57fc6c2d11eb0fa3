"""
GitHub Actions runtime helpers for gpt-review.

Log lines go to stdout as workflow commands (`::debug::`, `::error::`) so the
runner can show or hide them; debug lines only appear when the workflow is
re-run with debug logging enabled.

See: https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
"""

import json
import os
import sys
import uuid
from typing import Any, Dict, List, Optional


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def debug(message: str, obj: Optional[Dict[str, Any]] = None) -> None:
    """Print a debug message, optionally followed by an object as JSON."""
    print(f"::debug::{_escape_data(message)}")
    if obj is not None:
        print(f"::debug::{_escape_data(json.dumps(obj, indent=2, default=str))}")


def info(message: str) -> None:
    """Print a plain log line."""
    print(message)


def error(message: str) -> None:
    """Print an error annotation."""
    print(f"::error::{_escape_data(message)}")


def set_failed(message: str) -> None:
    """Report the failure and exit the step with a non-zero status."""
    error(message)
    sys.exit(1)


def set_output(name: str, value: str):
    """Set a step output for the GitHub Actions workflow."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with open(output_file, "a") as f:
            if "\n" in value:
                delimiter = uuid.uuid4().hex
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")


def format_summary(
    issue_url: Optional[str],
    request_body: str,
    request_url: Optional[str],
    response_body: str,
    response_url: Optional[str],
    payload: Dict[str, Any],
    prompt: List[Dict[str, Any]],
    usage_line: Optional[str] = None,
) -> str:
    """Build the markdown job summary for one request/response exchange."""
    sections = [
        f"[Issue]({issue_url})",
        "### Request",
        request_body,
        f"[Comment]({request_url})",
        "### Response",
        response_body,
        f"[Comment]({response_url})",
    ]
    if usage_line:
        sections.append(usage_line)
    sections.extend(
        [
            "### GitHub Context",
            f"```json\n{json.dumps(payload, indent=2, default=str)}\n```",
            "### Prompt",
            f"```json\n{json.dumps(prompt, indent=2)}\n```",
        ]
    )
    return "\n\n".join(sections) + "\n"


def write_summary(markdown: str) -> bool:
    """Append markdown to the job summary. Returns False outside Actions."""
    summary_file = os.environ.get("GITHUB_STEP_SUMMARY")
    if not summary_file:
        return False
    with open(summary_file, "a") as f:
        f.write(markdown)
    return True
