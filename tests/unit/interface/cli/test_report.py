from __future__ import annotations

"""
Unit tests for the rich console report.
"""

import dataclasses
import io
from typing import Tuple

from rich.console import Console

from combiner.domain.pipeline_models import FileTokenStat, SkippedFile, StatisticsSnapshot
from combiner.interface.cli.report import (
    render_skipped_files,
    render_summary,
    render_top_files,
    summary_rows,
)


def _console() -> Tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=120, color_system=None), buf


def _snapshot() -> StatisticsSnapshot:
    return StatisticsSnapshot(
        output_file="combined_output.txt",
        files_processed=3,
        files_skipped=1,
        directories_visited=2,
        total_tokens=42,
        max_tokens=20,
        max_tokens_file="src/app.py",
        started_at=0.0,
        elapsed_ms=15.9,
    )


def test_summary_rows_order_and_formatting() -> None:
    rows = summary_rows(_snapshot())

    assert [label for label, _ in rows] == [
        "Output File",
        "Files Processed",
        "Files Skipped",
        "Directories Visited",
        "Total Tokens",
        "Max Tokens",
        "File with Max Tokens",
        "Processing Time",
    ]
    assert dict(rows)["Processing Time"] == "15 ms"
    assert dict(rows)["Total Tokens"] == "42"


def test_render_summary_prints_table() -> None:
    console, buf = _console()

    render_summary(_snapshot(), console)
    out = buf.getvalue()

    assert "Statistic" in out
    assert "Files Processed" in out
    assert "src/app.py" in out
    assert "15 ms" in out


def test_render_top_files() -> None:
    console, buf = _console()

    render_top_files([FileTokenStat("big.txt", 99, 1024), FileTokenStat("small.txt", 1, 3)], console)
    out = buf.getvalue()

    assert "Top 2 Files by Token Count" in out
    assert "big.txt" in out
    assert "1024" in out


def test_render_top_files_empty_prints_nothing() -> None:
    console, buf = _console()

    render_top_files([], console)

    assert buf.getvalue() == ""


def test_bracketed_paths_are_not_read_as_markup() -> None:
    console, buf = _console()

    render_top_files(
        [FileTokenStat("app/[bold]/page.tsx", 3, 1), FileTokenStat("app/[id]/page.tsx", 3, 1)],
        console,
    )
    out = buf.getvalue()

    assert "app/[bold]/page.tsx" in out
    assert "app/[id]/page.tsx" in out


def test_summary_shows_bracketed_max_file_verbatim() -> None:
    console, buf = _console()
    snapshot = dataclasses.replace(_snapshot(), max_tokens_file="app/[id]/page.tsx")

    render_summary(snapshot, console)

    assert "app/[id]/page.tsx" in buf.getvalue()


def test_undecodable_names_are_printable() -> None:
    snapshot = dataclasses.replace(_snapshot(), max_tokens_file="bad\udcffname.txt")

    assert dict(summary_rows(snapshot))["File with Max Tokens"] == "bad�name.txt"


def test_render_skipped_files() -> None:
    console, buf = _console()

    render_skipped_files(
        [SkippedFile("assets/logo.png", "not valid UTF-8 text"), SkippedFile("[x].bin", "not valid UTF-8 text")],
        console,
    )
    out = buf.getvalue()

    assert "Skipped Files" in out
    assert "Reason" in out
    assert "assets/logo.png" in out
    assert "[x].bin" in out
    assert "not valid UTF-8 text" in out


def test_render_skipped_files_empty_prints_nothing() -> None:
    console, buf = _console()

    render_skipped_files([], console)

    assert buf.getvalue() == ""
