from __future__ import annotations

"""
Token Counting Adapter.

Maps a closed set of encoding names onto tiktoken BPE encodings and counts
tokens for accepted files, feeding each count into the run Aggregator.
Unknown encoding names fall back silently to the default scheme; failures
while loading an encoding or encoding text are fatal for the run.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Sequence

import tiktoken

from combiner.core.services.aggregator import Aggregator
from combiner.domain.errors import TokenizationError
from combiner.domain.pipeline_models import AcceptedFile, FileTokenStat

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENCODING REGISTRY
# -----------------------------------------------------------------------------

class Encoding(str, Enum):
    """Supported BPE encoding schemes."""
    O200K_BASE = "o200k_base"
    CL100K_BASE = "cl100k_base"
    P50K_BASE = "p50k_base"
    P50K_EDIT = "p50k_edit"
    R50K_BASE = "r50k_base"


DEFAULT_ENCODING = Encoding.CL100K_BASE


@dataclass(frozen=True)
class EncodingHandle:
    """A resolved encoding scheme and its loaded tiktoken encoder."""
    scheme: Encoding
    encoder: Any

    @property
    def name(self) -> str:
        return self.scheme.value


def resolve_encoding(name: str) -> Encoding:
    """
    Map a user-supplied name to a supported scheme.

    Matching is case-insensitive; anything unrecognised resolves to
    DEFAULT_ENCODING.
    """
    key = (name or "").strip().lower()
    for scheme in Encoding:
        if scheme.value == key:
            return scheme
    logger.debug(f"Unknown tokenizer '{name}'. Using {DEFAULT_ENCODING.value}.")
    return DEFAULT_ENCODING


def select_encoding(name: str) -> EncodingHandle:
    """
    Resolve and load the encoding for `name`.

    Args:
        name: Encoding name from configuration.

    Returns:
        EncodingHandle: Ready-to-use encoder.

    Raises:
        TokenizationError: If tiktoken cannot load the encoding.
    """
    scheme = resolve_encoding(name)
    try:
        encoder = tiktoken.get_encoding(scheme.value)
    except Exception as e:
        raise TokenizationError(f"Failed to load tokenizer '{scheme.value}': {e}") from e
    return EncodingHandle(scheme=scheme, encoder=encoder)


# -----------------------------------------------------------------------------
# COUNTING
# -----------------------------------------------------------------------------

def count_tokens(handle: EncodingHandle, text: str) -> int:
    """
    Count the tokens of `text` under the handle's encoding.

    Special-token markers are treated as ordinary text.

    Raises:
        TokenizationError: If the encoder rejects the text.
    """
    if not text:
        return 0
    try:
        return len(handle.encoder.encode(text, disallowed_special=()))
    except Exception as e:
        raise TokenizationError(f"Failed to encode text with '{handle.name}': {e}") from e


def process_files(
        handle: EncodingHandle,
        files: Sequence[AcceptedFile],
        aggregator: Aggregator,
        workers: int = 1,
) -> List[FileTokenStat]:
    """
    Count tokens for every accepted file and record them on the aggregator.

    With more than one worker the counting runs on a thread pool; results
    are gathered in input order and recorded in discovery order, so the
    max-token tie-break stays deterministic.

    Args:
        handle: Loaded encoding.
        files: Accepted files in discovery order.
        aggregator: Shared run statistics.
        workers: Size of the counting thread pool.

    Returns:
        List[FileTokenStat]: Per-file counts in discovery order.

    Raises:
        TokenizationError: On the first file that cannot be encoded.
    """
    def _count(accepted: AcceptedFile) -> int:
        return count_tokens(handle, accepted.contents.decode("utf-8"))

    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="TokenWorker") as executor:
            counts = list(executor.map(_count, files))
    else:
        counts = [_count(f) for f in files]

    stats: List[FileTokenStat] = []
    for accepted, tokens in zip(files, counts):
        aggregator.record_token_count(tokens, accepted.path)
        stats.append(FileTokenStat(path=accepted.path, tokens=tokens, size=accepted.size))

    return stats
