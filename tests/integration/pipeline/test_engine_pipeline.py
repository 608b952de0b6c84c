from __future__ import annotations

"""
Integration tests for the combine pipeline.

Runs the real traversal, writer and aggregator against temporary trees,
with the whitespace encoding stand-in for deterministic token counts.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from combiner.core.pipeline.engine import run_pipeline

EXPECTED_OUTPUT = (
    b"--- File: README.md ---\n# Project title\n\n"
    b"--- File: main.go ---\npackage main\n\n"
    b"--- File: src/app.py ---\ndef main():\n    return 1\n\n\n"
    b"--- File: src/util.py ---\nx = 1\n\n"
)


@pytest.fixture
def run_config(sample_project: Path, mock_config_dict: Dict[str, Any]) -> Dict[str, Any]:
    return mock_config_dict


def test_full_run(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    result = run_pipeline(run_config)

    assert result.ok is True, result.error
    assert result.encoding == "p50k_base"
    assert Path(result.output_path).read_bytes() == EXPECTED_OUTPUT

    stats = result.statistics
    assert stats is not None
    assert stats.files_processed == 4
    assert stats.files_skipped == 1
    assert stats.directories_visited == 2
    assert stats.total_tokens == 12
    assert stats.max_tokens == 4
    assert stats.max_tokens_file == "src/app.py"
    assert [s.path for s in result.file_stats] == ["README.md", "main.go", "src/app.py", "src/util.py"]


def test_output_outside_root_is_not_an_ignore_rule(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    result = run_pipeline(run_config)

    assert result.ignore_patterns == [".*"]


def test_output_inside_root_is_never_combined(
        sample_project: Path, run_config: Dict[str, Any], fake_encoding: List[str]
) -> None:
    run_config["output"] = str(sample_project / "combined_output.txt")

    first = run_pipeline(run_config)
    second = run_pipeline(run_config)

    assert first.ok and second.ok
    assert "combined_output.txt" in second.ignore_patterns
    assert (sample_project / "combined_output.txt").read_bytes() == EXPECTED_OUTPUT
    assert second.statistics is not None
    assert second.statistics.files_processed == 4


def test_user_ignore_patterns(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    run_config["ignore_patterns"] = ["src", "*.md"]

    result = run_pipeline(run_config)

    assert [s.path for s in result.file_stats] == ["main.go"]
    assert result.statistics is not None
    assert result.statistics.directories_visited == 1


def test_include_patterns_and_hidden(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    run_config["include_patterns"] = ["*.py", ".hidden"]
    run_config["include_hidden"] = True

    result = run_pipeline(run_config)

    assert [s.path for s in result.file_stats] == [".hidden", "src/app.py", "src/util.py"]
    assert result.statistics is not None
    assert result.statistics.directories_visited == 3


def test_parallel_counting_matches_sequential(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    sequential = run_pipeline(run_config)
    run_config["workers"] = 4
    parallel = run_pipeline(run_config)

    assert parallel.file_stats == sequential.file_stats
    assert parallel.statistics is not None and sequential.statistics is not None
    assert parallel.statistics.max_tokens_file == sequential.statistics.max_tokens_file


def test_top_files(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    result = run_pipeline(run_config)

    assert [s.path for s in result.top_files(2)] == ["src/app.py", "README.md"]


def test_unknown_tokenizer_falls_back(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    run_config["tokenizer"] = "gpt-9000"

    result = run_pipeline(run_config)

    assert result.ok is True
    assert result.encoding == "cl100k_base"


def test_relative_directory_resolves_against_cwd(
        sample_project: Path, monkeypatch: pytest.MonkeyPatch, fake_encoding: List[str]
) -> None:
    monkeypatch.chdir(sample_project)

    result = run_pipeline({"directory": "."})

    assert result.ok is True
    assert result.input_path == str(sample_project)
    assert "combined_output.txt" in result.ignore_patterns


# -----------------------------------------------------------------------------
# Fatal Failures
# -----------------------------------------------------------------------------
def test_invalid_input_directory(tmp_path: Path, fake_encoding: List[str]) -> None:
    result = run_pipeline({"directory": str(tmp_path / "missing")})

    assert result.ok is False
    assert "Invalid input directory" in result.error
    assert fake_encoding == []


def test_unwritable_output_fails_before_traversal(
        sample_project: Path, run_config: Dict[str, Any], fake_encoding: List[str]
) -> None:
    run_config["output"] = str(sample_project / "src")

    result = run_pipeline(run_config)

    assert result.ok is False
    assert "directory" in result.error
    assert result.statistics is not None
    assert result.statistics.files_processed == 0


def test_tokenizer_failure_is_fatal(run_config: Dict[str, Any]) -> None:
    with patch(
        "combiner.core.processing.tokenizer.tiktoken.get_encoding",
        side_effect=RuntimeError("download failed"),
    ):
        result = run_pipeline(run_config)

    assert result.ok is False
    assert "download failed" in result.error


# -----------------------------------------------------------------------------
# Implicit Exclusions & Unusual Names
# -----------------------------------------------------------------------------
def test_config_file_inside_root_is_never_combined(
        sample_project: Path, run_config: Dict[str, Any], fake_encoding: List[str]
) -> None:
    config_path = sample_project / "combiner.json"
    config_path.write_text('{"ignore_patterns": ["*.go"]}', encoding="utf-8")

    result = run_pipeline(run_config, config_file=str(config_path))

    assert result.ok is True
    assert "combiner.json" in result.ignore_patterns
    assert "combiner.json" not in [s.path for s in result.file_stats]
    assert b"combiner.json" not in Path(result.output_path).read_bytes()


def test_config_file_outside_root_adds_no_rule(
        tmp_path: Path, run_config: Dict[str, Any], fake_encoding: List[str]
) -> None:
    config_path = tmp_path / "combiner.json"
    config_path.write_text("{}", encoding="utf-8")

    result = run_pipeline(run_config, config_file=str(config_path))

    assert result.ignore_patterns == [".*"]


def test_skipped_files_are_reported(run_config: Dict[str, Any], fake_encoding: List[str]) -> None:
    result = run_pipeline(run_config)

    assert result.statistics is not None
    assert [s.path for s in result.statistics.skipped_files] == ["binary.bin"]


@pytest.mark.skipif(
    not sys.platform.startswith("linux") or sys.getfilesystemencoding().lower() != "utf-8",
    reason="needs a filesystem that stores arbitrary name bytes",
)
def test_undecodable_file_name_does_not_abort_the_run(
        tmp_path: Path, fake_encoding: List[str]
) -> None:
    root = tmp_path / "names"
    root.mkdir()
    with open(os.path.join(os.fsencode(str(root)), b"bad\xffname.txt"), "wb") as f:
        f.write(b"raw")
    (root / "ok.txt").write_bytes(b"fine")
    output = tmp_path / "combined.txt"

    result = run_pipeline({"directory": str(root), "output": str(output)})

    assert result.ok is True, result.error
    assert output.read_bytes() == (
        b"--- File: bad\xffname.txt ---\nraw\n\n"
        b"--- File: ok.txt ---\nfine\n\n"
    )
    assert result.statistics is not None
    assert result.statistics.files_processed == 2
