"""
Diff sanitization for gpt-review.

Lockfiles and build output make up a large share of many pull request diffs
while carrying nothing worth reviewing. They are cut out of the diff before
it is sent to the model to save characters of the prompt budget.
"""

import re
from typing import Iterable, List, Optional

FILE_NAME_PLACEHOLDER = "**FILE_NAME**"

# A whole `diff --git` section whose header names the file, up to the next
# section header or the end of the diff.
GIT_FLAG = "--git "
DIFF_SECTION_PATTERN = (
    rf"(?:diff {GIT_FLAG}\S*{FILE_NAME_PLACEHOLDER})"
    rf".*?(?=diff {GIT_FLAG}|(?=\n?$(?!\n)))"
)

DEFAULT_EXCLUDED_FILES = [
    "yarn.lock",
    "package-lock.json",
    ".env.EXAMPLE",
    "Gemfile.lock",
    "Podfile.lock",
    "Package.resolved",
    "dist/",
]


def remove_occurrences(text: str, pattern_template: str, file_names: Iterable[str]) -> str:
    """
    Remove every match of ``pattern_template`` for each file name.

    The placeholder ``**FILE_NAME**`` in the template is replaced with the
    regex-escaped file name, so names like ``.env.EXAMPLE`` match literally.
    Patterns are compiled with MULTILINE and DOTALL. Removals accumulate
    across ``file_names`` in order. An empty template returns ``text``.
    """
    if not pattern_template:
        return text

    for file_name in file_names:
        if not file_name:
            continue
        pattern = pattern_template.replace(FILE_NAME_PLACEHOLDER, re.escape(file_name))
        text = re.sub(pattern, "", text, flags=re.MULTILINE | re.DOTALL)
    return text


def sanitize_diff(diff: str, excluded_files: Optional[List[str]] = None) -> str:
    """Strip the sections of excluded files from a unified diff."""
    if excluded_files is None:
        excluded_files = DEFAULT_EXCLUDED_FILES
    return remove_occurrences(diff, DIFF_SECTION_PATTERN, excluded_files)


def split_file_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated file list, dropping blanks and whitespace."""
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]
