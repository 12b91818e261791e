"""
CLI to create the collection and ingest the configured source pages.

Example:
    python -m scripts.seed_db
    python -m scripts.seed_db --url https://en.wikipedia.org/wiki/Formula_One --keep-going
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from f1gpt.config import load_settings, setup_logging
from f1gpt.services import browser_loader, build_services


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the collection and ingest source pages.")
    parser.add_argument(
        "--url",
        action="append",
        dest="urls",
        help="Source URL to ingest (repeatable). Defaults to SOURCE_URLS.",
    )
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Drop the collection before ingesting instead of appending to it.",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Skip pages that fail instead of aborting the run.",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args(argv)

    try:
        settings = load_settings()
        services = build_services(settings)
        if args.fresh:
            services.vector_store.drop_collection(services.collection_name)

        with browser_loader(settings) as loader:
            service = services.ingestion_service(loader, continue_on_error=args.keep_going, logger_=logger)
            summary = service.run(args.urls or settings.source_urls)
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)

    print(f"Ingested {summary.documents} pages, {summary.indexed_chunks} chunks (elapsed {summary.elapsed_sec:.2f}s)")
    for url in summary.failed_urls:
        print(f"  failed: {url}")


if __name__ == "__main__":
    main()
