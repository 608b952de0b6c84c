from __future__ import annotations

"""
File Discovery Service.

Walks a project tree depth-first in lexical order, prunes entries matched
by the ignore rules, reads and validates candidate files, and returns the
accepted files in discovery order while recording outcomes on the shared
Aggregator. Every per-entry failure is a skip; the walk itself never aborts.
"""

import logging
import os
from typing import List, Optional

from combiner.core.pipeline.components.filters import CompiledMatcher
from combiner.core.pipeline.components.reader import is_valid_text, read_file_bytes
from combiner.core.services.aggregator import Aggregator
from combiner.domain.pipeline_models import AcceptedFile

logger = logging.getLogger(__name__)

SKIP_REASON_NOT_TEXT = "not valid UTF-8 text"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def collect_files(
        root: str,
        matcher: CompiledMatcher,
        aggregator: Aggregator,
        include: Optional[CompiledMatcher] = None,
) -> List[AcceptedFile]:
    """
    Traverse the tree under `root` and collect every accepted text file.

    Ignored directories are not descended into and ignored files are not
    read; neither touches a counter. Non-UTF-8 files count as skipped.
    Files that cannot be read are dropped without counting.

    Args:
        root: Scan root directory.
        matcher: Compiled ignore rules, queried with root-relative paths.
        aggregator: Shared statistics for the run.
        include: Optional compiled include rules; when non-empty only
                 files matching them are accepted.

    Returns:
        List[AcceptedFile]: Accepted files in depth-first lexical order.
    """
    root_abs = os.path.abspath(root)
    accepted: List[AcceptedFile] = []
    include_rules = include if include is not None and not include.is_empty() else None

    _walk(root_abs, "", matcher, include_rules, aggregator, accepted)

    logger.debug(
        f"Traversal finished: {len(accepted)} accepted file(s) under {root_abs}"
    )
    return accepted


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _walk(
        dir_path: str,
        rel_dir: str,
        matcher: CompiledMatcher,
        include: Optional[CompiledMatcher],
        aggregator: Aggregator,
        accepted: List[AcceptedFile],
) -> None:
    """Visit one directory level, recursing into child directories in order."""
    try:
        with os.scandir(dir_path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning(f"Error accessing path '{dir_path}': {e}")
        return

    for entry in entries:
        rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

        if matcher.matches(rel_path):
            logger.debug(f"Ignoring: {rel_path}")
            continue

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = not is_dir and entry.is_file()
        except OSError as e:
            logger.warning(f"Error accessing path '{entry.path}': {e}")
            continue

        if is_dir:
            aggregator.record_directory_visited()
            _walk(entry.path, rel_path, matcher, include, aggregator, accepted)
            continue

        if not is_file:
            logger.debug(f"Skipping non-regular entry: {rel_path}")
            continue

        if include is not None and not include.matches(rel_path):
            logger.debug(f"Not included: {rel_path}")
            continue

        _consider_file(entry.path, rel_path, aggregator, accepted)


def _consider_file(
        file_path: str,
        rel_path: str,
        aggregator: Aggregator,
        accepted: List[AcceptedFile],
) -> None:
    try:
        contents = read_file_bytes(file_path)
    except OSError as e:
        logger.debug(f"Error reading file '{file_path}': {e}")
        return

    if not is_valid_text(contents):
        logger.debug(f"Skipping file: {rel_path} is not valid UTF-8")
        aggregator.record_skipped_file(rel_path, SKIP_REASON_NOT_TEXT)
        return

    accepted.append(AcceptedFile(path=rel_path, contents=contents))
    aggregator.record_processed_file()
    logger.debug(f"File {rel_path}")
