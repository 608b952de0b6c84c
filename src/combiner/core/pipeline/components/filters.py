from __future__ import annotations

"""
Path Pattern Matching Engine.

Compiles ignore/include pattern strings into three matching strategies
(prefix, suffix and anchored regex) and answers membership queries against
root-relative paths. Matching is a pure union: the first strategy that hits
wins and no rule can re-include a path matched by another rule.
"""

import re
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Set

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------

WILDCARD = "*"
HIDDEN_PATTERN = ".*"

# A wildcard inside a pattern never crosses a directory boundary
_SEGMENT_RX = "[^/]*"


# -----------------------------------------------------------------------------
# COMPILED MATCHER
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CompiledMatcher:
    """
    Immutable union of prefix, suffix and general-regex rules.

    Built once per run by `compile_patterns` and shared read-only by every
    traversal decision.

    Attributes:
        prefixes: Literal prefixes (trailing-wildcard and plain patterns).
        suffixes: Literal suffixes (leading-wildcard patterns).
        regexes: Anchored expressions for interior-wildcard patterns.
    """
    prefixes: FrozenSet[str] = field(default_factory=frozenset)
    suffixes: FrozenSet[str] = field(default_factory=frozenset)
    regexes: FrozenSet[re.Pattern[str]] = field(default_factory=frozenset)

    def matches(self, path: str) -> bool:
        """Return True if the path is covered by any compiled rule."""
        return matches(self, path)

    def is_empty(self) -> bool:
        return not (self.prefixes or self.suffixes or self.regexes)


# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: Iterable[str]) -> CompiledMatcher:
    """
    Classify raw pattern strings into a CompiledMatcher.

    Classification is per pattern and order independent:
    - leading '*'  -> suffix rule on the remainder;
    - trailing '*' -> prefix rule on the remainder;
    - interior '*' -> anchored regex, '*' matching within one path segment;
    - no '*'       -> prefix rule on the whole literal.

    A plain literal therefore also matches any path that merely starts
    with it (".git" covers ".gitignore").

    Args:
        patterns: Raw pattern strings from configuration and CLI.

    Returns:
        CompiledMatcher: Read-only matcher.
    """
    prefixes: Set[str] = set()
    suffixes: Set[str] = set()
    regexes: Set[re.Pattern[str]] = set()

    for pattern in patterns:
        if pattern.startswith(WILDCARD):
            suffixes.add(pattern[1:])
        elif pattern.endswith(WILDCARD):
            prefixes.add(pattern[:-1])
        elif WILDCARD in pattern:
            regexes.add(_wildcard_to_regex(pattern))
        else:
            prefixes.add(pattern)

    return CompiledMatcher(
        prefixes=frozenset(prefixes),
        suffixes=frozenset(suffixes),
        regexes=frozenset(regexes),
    )


def matches(matcher: CompiledMatcher, path: str) -> bool:
    """
    Check a path against every rule of the matcher.

    Args:
        matcher: Compiled rule set.
        path: Path relative to the scan root; backslashes are normalised.

    Returns:
        bool: True on the first rule that matches.
    """
    normalized = to_slash(path)

    if any(normalized.startswith(prefix) for prefix in matcher.prefixes):
        return True
    if any(normalized.endswith(suffix) for suffix in matcher.suffixes):
        return True
    return any(rx.fullmatch(normalized) for rx in matcher.regexes)


def to_slash(path: str) -> str:
    return path.replace("\\", "/")


# -----------------------------------------------------------------------------
# PATTERN SET ASSEMBLY
# -----------------------------------------------------------------------------

def build_ignore_patterns(
        patterns: Iterable[str],
        output_rel_path: str = "",
        include_hidden: bool = False,
        config_rel_path: str = "",
) -> List[str]:
    """
    Merge user patterns with the implicit run rules.

    The output artifact and the config file in use are always ignored, so
    a run never combines its own product or settings. Hidden entries are
    ignored through the '.*' rule unless explicitly requested.

    Args:
        patterns: Patterns from the config file and CLI, in that order.
        output_rel_path: Root-relative path of the output file, if inside root.
        include_hidden: Skip adding the hidden-entry rule.
        config_rel_path: Root-relative path of the config file, if inside root.

    Returns:
        List[str]: Final ordered pattern list.
    """
    merged = list(patterns)
    if output_rel_path:
        merged.append(output_rel_path)
    if config_rel_path:
        merged.append(config_rel_path)
    if not include_hidden:
        merged.append(HIDDEN_PATTERN)
    return merged


def _wildcard_to_regex(pattern: str) -> re.Pattern[str]:
    """Escape literal runs and turn each '*' into a single-segment wildcard."""
    literal_runs = pattern.split(WILDCARD)
    body = _SEGMENT_RX.join(re.escape(run) for run in literal_runs)
    return re.compile(f"^{body}$")
