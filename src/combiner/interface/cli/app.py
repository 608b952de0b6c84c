from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, optional JSON config file, CLI overrides), pipeline execution
and result rendering.
"""

import json
import logging
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from rich.console import Console

from combiner.core.pipeline.engine import run_pipeline
from combiner.core.pipeline.stages.validator import validate_config
from combiner.domain.config import get_default_config, load_config_file, merge_config
from combiner.domain.errors import ConfigError
from combiner.domain.pipeline_models import PipelineResult
from combiner.infra.logging import configure_logging, shutdown_logging
from combiner.interface.cli import args as cli_args
from combiner.interface.cli.report import render_skipped_files, render_summary, render_top_files

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(bool(args.verbose), args.log_file)

    try:
        return _run(args)
    finally:
        shutdown_logging()


def _run(args: Any) -> int:
    # 3. Resolve configuration hierarchy
    try:
        clean_conf = _resolve_config(args)
    except ConfigError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    if clean_conf["verbose"] and not args.verbose:
        configure_logging(True, args.log_file)

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Pre-flight input verification
    input_path = os.path.abspath(clean_conf["directory"])
    if not os.path.isdir(input_path):
        msg = f"Input path does not exist or is not a directory: {input_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_USAGE

    # 5. Pipeline execution phase
    logger.info(f"Targeting input directory: {input_path}")
    try:
        result = run_pipeline(clean_conf, config_file=args.config_file)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Pipeline failed: {e}", exc_info=True)
        print(f"ERROR: Pipeline failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 6. Output rendering phase
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        # ASCII escapes keep undecodable file names printable
        print(json.dumps(asdict(result), indent=2))
    else:
        _print_human_summary(result, clean_conf["top"])

    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION RESOLUTION
# -----------------------------------------------------------------------------

def _resolve_config(args: Any) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Order of precedence: defaults < config file < CLI flags. Pattern lists
    from the config file and the CLI are concatenated.

    Raises:
        ConfigError: If the config file cannot be loaded.
    """
    base = get_default_config()
    if args.config_file:
        base.update(load_config_file(args.config_file))

    base, warnings = validate_config(base, strict=False)
    merged = merge_config(base, cli_args.args_to_overrides(args))
    clean_conf, more_warnings = validate_config(merged, strict=False)

    for w in warnings + more_warnings:
        logger.warning(f"Configuration Constraint: {w}")

    return clean_conf

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: PipelineResult, top: int) -> None:
    """Render the statistics, skipped files and, if requested, top files tables."""
    console = Console()
    if result.statistics is not None:
        render_summary(result.statistics, console)
        render_skipped_files(result.statistics.skipped_files, console)
    render_top_files(result.top_files(top), console)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
