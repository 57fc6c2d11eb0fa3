"""Pytest configuration for gpt-review tests."""

import sys
from pathlib import Path

# Add the repository root to path so tests can import gpt_review without installing
root_dir = Path(__file__).parent
sys.path.insert(0, str(root_dir))
