from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A deterministic stand-in for tiktoken encodings, so tests never need to
   download BPE files.
3. Shared filesystem fixtures.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Tokenizer Stand-in
# -----------------------------------------------------------------------------
class FakeEncoding:
    """Whitespace 'tokenizer' exposing the tiktoken.Encoding.encode signature."""

    def __init__(self, name: str) -> None:
        self.name = name

    def encode(self, text: str, disallowed_special: Any = "all") -> List[str]:
        return text.split()


@pytest.fixture
def fake_encoding(monkeypatch: pytest.MonkeyPatch) -> List[str]:
    """
    Replace tiktoken.get_encoding with a whitespace counter.

    Returns:
        List[str]: Names of the encodings requested during the test.
    """
    from combiner.core.processing import tokenizer

    requested: List[str] = []

    def _get_encoding(name: str) -> FakeEncoding:
        requested.append(name)
        return FakeEncoding(name)

    monkeypatch.setattr(tokenizer.tiktoken, "get_encoding", _get_encoding)
    return requested


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_config_dict(tmp_path: Path) -> Dict[str, Any]:
    """Return a complete, valid configuration dictionary."""
    return {
        "directory": str(tmp_path / "project"),
        "output": str(tmp_path / "out" / "combined_output.txt"),
        "tokenizer": "p50k_base",
        "ignore_patterns": [],
        "include_patterns": [],
        "include_hidden": False,
        "verbose": False,
        "workers": 1,
        "top": 0,
    }


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a small project tree.

    Structure:
    /project
      .hidden              (hidden, filtered)
      README.md
      binary.bin           (not UTF-8, skipped)
      main.go
      src/
        app.py
        util.py
      .git/
        config
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / ".hidden").write_text("secret", encoding="utf-8")
    (root / "README.md").write_text("# Project title", encoding="utf-8")
    (root / "binary.bin").write_bytes(b"\xff\xfe\x00\x81 binary")
    (root / "main.go").write_text("package main", encoding="utf-8")

    src = root / "src"
    src.mkdir()
    (src / "app.py").write_text("def main():\n    return 1\n", encoding="utf-8")
    (src / "util.py").write_text("x = 1", encoding="utf-8")

    git = root / ".git"
    git.mkdir()
    (git / "config").write_text("[core]", encoding="utf-8")
    return root
