"""
Shared pytest configuration and fixtures for routelens tests.

The express_app fixture project under tests/code_examples mirrors a small
Express API with auth and user routers; most end-to-end tests run against it.
"""

from pathlib import Path
from typing import Callable, Dict

import pytest

CODE_EXAMPLES = Path(__file__).parent / "code_examples"


@pytest.fixture
def express_app_dir() -> Path:
    """Root of the bundled Express fixture project."""
    return CODE_EXAMPLES / "express_app"


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """
    Factory that writes a throwaway project from a mapping of relative path to text.

    Returns the project root.
    """

    def _make(files: Dict[str, str]) -> Path:
        for relative, text in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path

    return _make
