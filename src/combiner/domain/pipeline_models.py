from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the immutable records exchanged between the scanner, tokenizer,
writer and interface layers, plus factory functions for run results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AcceptedFile:
    """
    A file that passed pattern filtering and the text-validity check.

    Attributes:
        path: Path relative to the scan root, '/'-separated.
        contents: Raw file bytes, written to the output verbatim.
    """
    path: str
    contents: bytes

    @property
    def size(self) -> int:
        return len(self.contents)


@dataclass(frozen=True)
class FileTokenStat:
    """Token count of a single accepted file."""
    path: str
    tokens: int
    size: int


@dataclass(frozen=True)
class SkippedFile:
    """A file excluded after reading, with the reason shown in the report."""
    path: str
    reason: str


@dataclass(frozen=True)
class StatisticsSnapshot:
    """
    Point-in-time copy of the run statistics.

    Safe to format and serialise without holding the aggregator lock.

    Attributes:
        output_file: Path of the combined output artifact.
        files_processed: Accepted text files.
        files_skipped: Files excluded for not being valid text.
        directories_visited: Directories walked, the scan root included.
        total_tokens: Sum of tokens over all accepted files.
        max_tokens: Largest per-file token count.
        max_tokens_file: Path owning `max_tokens` (first one on ties).
        started_at: Wall-clock start time (epoch seconds).
        elapsed_ms: Milliseconds between aggregator creation and snapshot.
        skipped_files: Skipped files in discovery order.
    """
    output_file: str
    files_processed: int
    files_skipped: int
    directories_visited: int
    total_tokens: int
    max_tokens: int
    max_tokens_file: str
    started_at: float
    elapsed_ms: float
    skipped_files: Tuple[SkippedFile, ...] = ()


@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result of a complete run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        input_path: Normalised scan root.
        output_path: Absolute path of the combined output file.
        encoding: Name of the resolved token encoding.
        ignore_patterns: Final ignore pattern list (implicit rules included).
        include_patterns: Include pattern list (empty means everything).
        statistics: Final statistics snapshot, if traversal ran.
        file_stats: Per-file token counts in discovery order.
    """
    ok: bool
    error: str

    input_path: str
    output_path: str
    encoding: str = ""

    ignore_patterns: List[str] = field(default_factory=list)
    include_patterns: List[str] = field(default_factory=list)

    statistics: Optional[StatisticsSnapshot] = None
    file_stats: List[FileTokenStat] = field(default_factory=list)

    def top_files(self, limit: int) -> List[FileTokenStat]:
        """Return the `limit` heaviest files; ties keep discovery order."""
        if limit <= 0:
            return []
        ranked = sorted(self.file_stats, key=lambda s: s.tokens, reverse=True)
        return ranked[:limit]


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        input_path: str,
        output_path: str = "",
        statistics: Optional[StatisticsSnapshot] = None,
) -> PipelineResult:
    """
    Create a failed pipeline result instance.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        input_path: The target input directory.
        output_path: Resolved output file path, if known.
        statistics: Partial statistics, if traversal had started.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        input_path=input_path,
        output_path=output_path,
        encoding=cfg.get("tokenizer", ""),
        ignore_patterns=list(cfg.get("ignore_patterns", [])),
        include_patterns=list(cfg.get("include_patterns", [])),
        statistics=statistics,
    )


def create_success_result(
        input_path: str,
        output_path: str,
        encoding: str,
        ignore_patterns: List[str],
        include_patterns: List[str],
        statistics: StatisticsSnapshot,
        file_stats: Optional[List[FileTokenStat]] = None,
) -> PipelineResult:
    """Create a successful pipeline result instance."""
    return PipelineResult(
        ok=True,
        error="",
        input_path=input_path,
        output_path=output_path,
        encoding=encoding,
        ignore_patterns=list(ignore_patterns),
        include_patterns=list(include_patterns),
        statistics=statistics,
        file_stats=file_stats or [],
    )
