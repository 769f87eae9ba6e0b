"""Command-line entry point for the example workloads.

Usage:
    python -m crpt_api.main path/to/document.json --threads 10 --time-unit minutes
"""

from __future__ import annotations

import argparse
import logging
import sys

from crpt_api.adapters.rate_limit.base import TimeUnit
from crpt_api.core.config import settings
from crpt_api.core.errors import AppError
from crpt_api.core.logging import configure_logging
from crpt_api.runner import (
    DEFAULT_ITERATIONS,
    DEFAULT_SIGNATURE,
    run_many_threads_example,
    run_single_thread_example,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Submit a document to the CRPT API under a rate limit."
    )
    parser.add_argument("document_path", help="Path to a JSON document file")
    parser.add_argument(
        "--limit",
        type=int,
        default=settings.crpt.request_limit,
        help="Maximum submissions per window",
    )
    parser.add_argument(
        "--time-unit",
        type=TimeUnit,
        default=settings.crpt.time_unit,
        help="Window length (one unit)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=0,
        help="Run with this many worker threads (0 runs on the main thread)",
    )
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    parser.add_argument("--signature", default=DEFAULT_SIGNATURE)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log)

    try:
        if args.threads > 0:
            completed = run_many_threads_example(
                args.document_path,
                args.time_unit,
                args.limit,
                args.threads,
                iterations=args.iterations,
                signature=args.signature,
            )
        else:
            completed = len(
                run_single_thread_example(
                    args.document_path,
                    args.time_unit,
                    args.limit,
                    iterations=args.iterations,
                    signature=args.signature,
                )
            )
    except AppError as exc:
        logger.error("runner.failed", extra={"error_code": exc.code, "error_message": exc.message})
        return 1

    logger.info("runner.completed", extra={"submissions": completed})
    return 0


if __name__ == "__main__":
    sys.exit(main())
