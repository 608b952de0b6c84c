from __future__ import annotations

"""
Combined Output Writer.

Persists accepted files into a single artifact. Each entry is a header line
followed by the raw file bytes and a blank separator line:

--- File: <relative-path> ---
<content>
<blank line>
"""

import logging
import os
from typing import Iterable

from combiner.domain.errors import OutputError
from combiner.domain.pipeline_models import AcceptedFile
from combiner.infra.fs import safe_mkdir

logger = logging.getLogger(__name__)

HEADER_TEMPLATE = "--- File: {path} ---\n"


# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

def format_header(rel_path: str) -> bytes:
    """
    Build the entry header for a root-relative path.

    Names that are not valid UTF-8 reach Python as surrogate escapes;
    encoding with 'surrogateescape' writes their original bytes back.
    """
    return HEADER_TEMPLATE.format(path=rel_path).encode("utf-8", "surrogateescape")



def prepare_output_file(output_path: str) -> None:
    """
    Verify the output artifact can be created before any traversal work.

    Creates missing parent directories and opens the file for append, which
    creates it empty when absent without truncating existing content.

    Args:
        output_path: Absolute target path.

    Raises:
        OutputError: If the path is a directory or cannot be opened.
    """
    if os.path.isdir(output_path):
        raise OutputError(f"Output path '{output_path}' is a directory")

    parent = os.path.dirname(os.path.abspath(output_path))
    created, err = safe_mkdir(parent)
    if not created:
        raise OutputError(f"Could not create directory '{parent}': {err}")

    try:
        with open(output_path, "ab"):
            pass
    except OSError as e:
        raise OutputError(f"Failed to create output file '{output_path}': {e}") from e


def write_combined_output(output_path: str, files: Iterable[AcceptedFile]) -> int:
    """
    Write every accepted file, in the given order, into one artifact.

    The handle is opened once and always closed, including on failure.

    Args:
        output_path: Target file; truncated if it exists.
        files: Accepted files in discovery order.

    Returns:
        int: Number of bytes written.

    Raises:
        OutputError: If the file cannot be created or written.
    """
    written = 0
    try:
        with open(output_path, "wb") as out:
            for accepted in files:
                header = format_header(accepted.path)
                out.write(header)
                out.write(accepted.contents)
                out.write(b"\n\n")
                written += len(header) + len(accepted.contents) + 2
    except OSError as e:
        raise OutputError(f"Failed to write output file '{output_path}': {e}") from e

    logger.debug(f"Wrote {written} bytes to {output_path}")
    return written
