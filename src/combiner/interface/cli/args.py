from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
configuration overrides. Every flag defaults to None so that values coming
from a config file are only replaced by flags the user actually passed.
"""

import argparse
from typing import Any, Dict, List, Optional

from combiner.domain.config import DEFAULT_OUTPUT_FILE, DEFAULT_TOKENIZER

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the combiner CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="combiner",
        description=(
            "Combine the text files of a directory tree into a single file "
            "and report token statistics."
        ),
    )

    # --- Path Management ---
    p.add_argument(
        "-d", "--directory",
        dest="directory",
        default=None,
        help="Directory to traverse (default: current directory).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output",
        default=None,
        help=f"Output file path/name (default: {DEFAULT_OUTPUT_FILE}).",
    )
    p.add_argument(
        "-c", "--config",
        dest="config_file",
        default=None,
        help="JSON config file providing base values.",
    )

    # --- Filtering ---
    p.add_argument(
        "-i", "--ignore",
        dest="ignore_patterns",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Files/directories to ignore. Repeatable, comma separated values allowed.",
    )
    p.add_argument(
        "--include",
        dest="include_patterns",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Only accept files matching these patterns. Repeatable.",
    )
    p.add_argument(
        "--include-hidden",
        dest="include_hidden",
        action="store_true",
        default=None,
        help="Include hidden files and directories.",
    )

    # --- Token Counting ---
    p.add_argument(
        "-t", "--tokenizer",
        dest="tokenizer",
        default=None,
        help=f"Tokenizer to use (default: {DEFAULT_TOKENIZER}).",
    )
    p.add_argument(
        "--workers",
        dest="workers",
        type=int,
        default=None,
        help="Threads used for token counting (default: 1).",
    )

    # --- Reporting ---
    p.add_argument(
        "--top",
        dest="top",
        type=int,
        default=None,
        help="Also list the N files with the most tokens.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON instead of a table.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "-v", "--verbose",
        dest="verbose",
        action="store_true",
        default=None,
        help="Print per-file diagnostics.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to a rotating log file.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides; unset flags map to None.
    """
    return {
        "directory": args.directory,
        "output": args.output,
        "tokenizer": args.tokenizer,
        "ignore_patterns": _flatten_csv(args.ignore_patterns),
        "include_patterns": _flatten_csv(args.include_patterns),
        "include_hidden": args.include_hidden,
        "verbose": args.verbose,
        "workers": args.workers,
        "top": args.top,
    }

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _flatten_csv(values: Optional[List[str]]) -> Optional[List[str]]:
    """
    Expand repeated flag values, splitting each on commas.

    ["a,b", "c"] -> ["a", "b", "c"]. Empty items are dropped.
    """
    if values is None:
        return None
    out: List[str] = []
    for value in values:
        out.extend(x.strip() for x in value.split(",") if x.strip())
    return out
