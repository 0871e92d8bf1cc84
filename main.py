#!/usr/bin/env python3
"""
Batch entry point for SiteQualifier.

Reads a run input JSON (the same record an Apify actor receives as INPUT),
qualifies every website in it and exits. Intended for containers and
schedulers; use the ``sitequalifier`` command for interactive runs.

Environment:
    SITEQUALIFIER_INPUT    path of the input JSON
                           (default: ./storage/key_value_stores/INPUT.json)
    SITEQUALIFIER_CONFIG   optional YAML configuration file
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import structlog

from sitequalifier.config import RunInput, load_config
from sitequalifier.container import run_qualification
from sitequalifier.errors import BrowserLaunchError, InputValidationError
from sitequalifier.observability import configure_logging, start_metrics_server

DEFAULT_INPUT_PATH = Path("./storage/key_value_stores/INPUT.json")

logger = structlog.get_logger(__name__)


async def main() -> int:
    """Main entry point. Returns the process exit status."""
    config_path = os.getenv("SITEQUALIFIER_CONFIG")
    config = load_config(Path(config_path) if config_path else None)
    configure_logging(config.monitoring)
    start_metrics_server(config.monitoring.prometheus_port)

    input_path = Path(os.getenv("SITEQUALIFIER_INPUT", str(DEFAULT_INPUT_PATH)))

    try:
        run_input = RunInput.from_json_file(input_path, config)
    except InputValidationError as e:
        logger.error("Invalid run input", path=str(input_path), error=str(e), problems=e.problems)
        return 2

    logger.info("Starting AI Website Qualifying Agent", url_count=len(run_input.urls))

    try:
        summary = await run_qualification(run_input, config)
    except BrowserLaunchError as e:
        logger.error("Browser could not be started", error=str(e))
        return 1
    except Exception as e:
        logger.error("Unhandled exception in main", error=str(e))
        return 1

    logger.info(
        "Complete",
        total=summary.total,
        qualified=summary.qualified,
        disqualified=summary.disqualified,
    )
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
