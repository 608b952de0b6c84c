from __future__ import annotations

"""
Run Statistics Aggregator.

Thread-safe accumulator shared by the scanner and the tokenizer stage.
Every mutation is a single lock-protected update so concurrent callers
never lose increments; readers obtain an immutable snapshot.
"""

import threading
import time
from typing import List

from combiner.domain.pipeline_models import SkippedFile, StatisticsSnapshot


class Aggregator:
    """
    Counters and token statistics for one run.

    The directory counter starts at 1 so the scan root is accounted for
    before traversal begins. Elapsed time is measured on a monotonic clock
    from construction to `snapshot()`.
    """

    def __init__(self, output_file: str = "") -> None:
        self._lock = threading.Lock()
        self._output_file = output_file
        self._started_at = time.time()
        self._started_mono = time.monotonic()

        self._directories_visited = 1
        self._files_processed = 0
        self._files_skipped = 0
        self._total_tokens = 0
        self._max_tokens = 0
        self._max_tokens_file = ""
        self._skipped: List[SkippedFile] = []

    # -------------------------------------------------------------------------
    # MUTATIONS
    # -------------------------------------------------------------------------

    def record_processed_file(self) -> None:
        with self._lock:
            self._files_processed += 1

    def record_skipped_file(self, path: str = "", reason: str = "") -> None:
        """Count a skipped file; a non-empty path is also kept for the report."""
        with self._lock:
            self._files_skipped += 1
            if path:
                self._skipped.append(SkippedFile(path=path, reason=reason))

    def record_directory_visited(self) -> None:
        with self._lock:
            self._directories_visited += 1

    def record_token_count(self, count: int, path: str) -> None:
        """
        Add a file's tokens to the total and track the heaviest file.

        The max record changes only on a strictly greater count, so the
        first file to reach a given maximum keeps it.

        Args:
            count: Token count of the file.
            path: Root-relative path of the file.
        """
        with self._lock:
            self._total_tokens += count
            if count > self._max_tokens:
                self._max_tokens = count
                self._max_tokens_file = path

    # -------------------------------------------------------------------------
    # READS
    # -------------------------------------------------------------------------

    def snapshot(self) -> StatisticsSnapshot:
        """Return an immutable copy of the current statistics."""
        with self._lock:
            elapsed_ms = (time.monotonic() - self._started_mono) * 1000.0
            return StatisticsSnapshot(
                output_file=self._output_file,
                files_processed=self._files_processed,
                files_skipped=self._files_skipped,
                directories_visited=self._directories_visited,
                total_tokens=self._total_tokens,
                max_tokens=self._max_tokens,
                max_tokens_file=self._max_tokens_file,
                started_at=self._started_at,
                elapsed_ms=elapsed_ms,
                skipped_files=tuple(self._skipped),
            )
