from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates a complete combiner run:
1. Validates configuration and resolves input/output paths.
2. Pre-flights the output file and loads the token encoding.
3. Compiles ignore/include rules (implicit rules included).
4. Traverses the tree and collects accepted files.
5. Counts tokens per file and updates the run statistics.
6. Writes the combined output artifact.
"""

import logging
import os
from typing import Any, Dict, Optional

from combiner.core.pipeline.components.filters import build_ignore_patterns, compile_patterns
from combiner.core.pipeline.components.writer import prepare_output_file, write_combined_output
from combiner.core.pipeline.stages.validator import validate_config
from combiner.core.processing.tokenizer import process_files, select_encoding
from combiner.core.services.aggregator import Aggregator
from combiner.core.services.scanner import collect_files
from combiner.domain.config import DEFAULT_OUTPUT_FILE
from combiner.domain.errors import CombinerError
from combiner.domain.pipeline_models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from combiner.infra.fs import normalize_path, relative_to_root

logger = logging.getLogger(__name__)


def run_pipeline(
        config: Optional[Dict[str, Any]],
        config_file: Optional[str] = None,
) -> PipelineResult:
    """
    Execute the full combine pipeline.

    Fatal failures (invalid input directory, unwritable output, tokenizer
    errors) end the run and are reported through the returned result;
    per-entry problems are skipped inside the traversal.

    Args:
        config: The configuration dictionary (raw or partial).
        config_file: Path of the config file the values came from, if any;
                     it is ignored when it lies inside the scan root.

    Returns:
        PipelineResult: Object containing status, statistics and file counts.
    """
    logger.info("Pipeline execution started.")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config if config is not None else {}, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    cwd = os.getcwd()
    input_path = normalize_path(cfg["directory"], cwd)
    output_path = normalize_path(cfg["output"], DEFAULT_OUTPUT_FILE)

    if not os.path.isdir(input_path):
        msg = f"Invalid input directory: {input_path}"
        logger.error(msg)
        return create_error_result(msg, cfg, input_path, output_path)

    aggregator = Aggregator(output_file=cfg["output"])

    ignore_patterns = build_ignore_patterns(
        cfg["ignore_patterns"],
        output_rel_path=relative_to_root(output_path, input_path),
        include_hidden=cfg["include_hidden"],
        config_rel_path=relative_to_root(config_file, input_path) if config_file else "",
    )
    include_patterns = cfg["include_patterns"]

    try:
        # ---------------------------------------------------------------------
        # 2) Pre-flight: output artifact and encoding
        # ---------------------------------------------------------------------
        prepare_output_file(output_path)
        handle = select_encoding(cfg["tokenizer"])
        logger.debug(f"Using encoding {handle.name}")

        # ---------------------------------------------------------------------
        # 3) Rules & Traversal
        # ---------------------------------------------------------------------
        matcher = compile_patterns(ignore_patterns)
        include = compile_patterns(include_patterns)
        logger.debug(f"Ignore patterns: {ignore_patterns}")

        files = collect_files(input_path, matcher, aggregator, include=include)

        # ---------------------------------------------------------------------
        # 4) Token metrics & Output
        # ---------------------------------------------------------------------
        file_stats = process_files(handle, files, aggregator, workers=cfg["workers"])
        write_combined_output(output_path, files)

    except CombinerError as e:
        msg = str(e)
        logger.error(msg)
        failed = dict(cfg, ignore_patterns=ignore_patterns)
        return create_error_result(
            msg, failed, input_path, output_path, statistics=aggregator.snapshot()
        )

    snapshot = aggregator.snapshot()
    logger.info(
        f"Pipeline finished. Processed: {snapshot.files_processed}, "
        f"skipped: {snapshot.files_skipped}, tokens: {snapshot.total_tokens}"
    )

    return create_success_result(
        input_path=input_path,
        output_path=output_path,
        encoding=handle.name,
        ignore_patterns=ignore_patterns,
        include_patterns=include_patterns,
        statistics=snapshot,
        file_stats=file_stats,
    )
