from __future__ import annotations

"""
Console Report Rendering.

Turns a statistics snapshot into terminal tables using rich. Rendering only
reads immutable snapshots, so no lock is held while printing. Paths are
escaped before they reach a table: a name like 'app/[id]/page.tsx' must not
be read as console markup.
"""

from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from combiner.domain.pipeline_models import FileTokenStat, SkippedFile, StatisticsSnapshot
from combiner.infra.fs import display_path


def _path_cell(path: str) -> str:
    return escape(display_path(path))


def summary_rows(snapshot: StatisticsSnapshot) -> List[Tuple[str, str]]:
    """Return the (statistic, value) rows of the summary table, in order."""
    return [
        ("Output File", _path_cell(snapshot.output_file)),
        ("Files Processed", str(snapshot.files_processed)),
        ("Files Skipped", str(snapshot.files_skipped)),
        ("Directories Visited", str(snapshot.directories_visited)),
        ("Total Tokens", str(snapshot.total_tokens)),
        ("Max Tokens", str(snapshot.max_tokens)),
        ("File with Max Tokens", _path_cell(snapshot.max_tokens_file)),
        ("Processing Time", f"{int(snapshot.elapsed_ms)} ms"),
    ]


def _table(title: Optional[str] = None) -> Table:
    return Table(title=title, show_header=True, header_style="bold magenta", border_style="dim")


def render_summary(snapshot: StatisticsSnapshot, console: Optional[Console] = None) -> None:
    """
    Print the run statistics as a two-column table.

    Args:
        snapshot: Final statistics of the run.
        console: Target console; defaults to stdout.
    """
    console = console or Console()

    table = _table()
    table.add_column("Statistic", justify="left")
    table.add_column("Value", justify="left")
    for label, value in summary_rows(snapshot):
        table.add_row(label, value)

    console.print(table)


def render_top_files(stats: Sequence[FileTokenStat], console: Optional[Console] = None) -> None:
    """Print the heaviest files, already ranked by the caller."""
    if not stats:
        return
    console = console or Console()

    table = _table(f"Top {len(stats)} Files by Token Count")
    table.add_column("File")
    table.add_column("Tokens", justify="right")
    table.add_column("Size (bytes)", justify="right")
    for stat in stats:
        table.add_row(_path_cell(stat.path), str(stat.tokens), str(stat.size))

    console.print(table)


def render_skipped_files(skipped: Sequence[SkippedFile], console: Optional[Console] = None) -> None:
    """Print each skipped file with the reason it was left out."""
    if not skipped:
        return
    console = console or Console()

    table = _table("Skipped Files")
    table.add_column("File")
    table.add_column("Reason")
    for entry in skipped:
        table.add_row(_path_cell(entry.path), escape(entry.reason))

    console.print(table)
