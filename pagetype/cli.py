"""Command-line entry point: classify one page and optionally record its metrics."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import httpx

from pagetype.config import ClassifierConfig
from pagetype.services.classifier import classify_page
from pagetype.services.fetcher import fetch_page
from pagetype.services.report import append_metrics_report

logger = logging.getLogger("pagetype.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagetype",
        description="Classify a web page from its URL and HTML.",
    )
    parser.add_argument("url", help="URL of the page to classify")
    parser.add_argument(
        "--html-file",
        type=Path,
        help="Read the page HTML from this file instead of fetching the URL",
    )
    parser.add_argument(
        "--metrics-out",
        type=Path,
        help="Append the per-extractor metrics to this JSON array file",
    )
    parser.add_argument(
        "--scratch-dir",
        type=Path,
        help="Directory for downloaded images (emptied on every run)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Run the extractor passes concurrently",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


async def _run(args: argparse.Namespace) -> int:
    if args.html_file is not None:
        html = args.html_file.read_text(encoding="utf-8")
    else:
        try:
            html = await fetch_page(args.url)
        except (ValueError, OSError, RuntimeError, httpx.HTTPError) as exc:
            logger.error("Could not fetch %s: %s", args.url, exc)
            return 1

    config = ClassifierConfig(parallel_extractors=args.parallel)
    if args.scratch_dir is not None:
        config.scratch_dir = args.scratch_dir

    result = await classify_page(args.url, html, config=config)
    print(result.summary())

    if args.metrics_out is not None:
        total = append_metrics_report(args.metrics_out, result.metrics_report())
        logger.info("Total metrics entries: %d", total)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
