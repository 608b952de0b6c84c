from __future__ import annotations

"""
File Reading Component.

Reads candidate files as raw bytes and decides whether their content is
text. Bytes are never transformed: accepted content reaches the output
exactly as stored on disk.
"""

TEXT_ENCODING = "utf-8"


def read_file_bytes(file_path: str) -> bytes:
    """
    Read the full content of a file.

    Args:
        file_path: Absolute path to the target file.

    Returns:
        bytes: Raw file content.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(file_path, "rb") as f:
        return f.read()


def is_valid_text(data: bytes) -> bool:
    """Return True if the bytes form well-formed UTF-8."""
    try:
        data.decode(TEXT_ENCODING)
    except UnicodeDecodeError:
        return False
    return True
