"""Pytest configuration shared by the test suite.

- Ensures the project root is available on ``sys.path`` for imports.
- Provides a ``site_config`` fixture rooted in a temporary directory.
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from docsite.config import SiteConfig  # noqa: E402


@pytest.fixture
def site_config(tmp_path: Path) -> SiteConfig:
    """Return a configuration whose project root is ``tmp_path``."""
    return SiteConfig(project_root=tmp_path.resolve())
