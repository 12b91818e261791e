"""
Utility script to preview a few stored records.

Usage:
    python -m scripts.check_db --limit 3
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from f1gpt.config import load_settings, setup_logging
from f1gpt.services import build_services

PREVIEW_CHARS = 300


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Preview stored records.")
    parser.add_argument("--limit", type=int, default=3, help="Number of records to show")
    args = parser.parse_args(argv)

    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        services = build_services(load_settings())
        records = services.vector_store.sample(services.collection_name, args.limit)
    except Exception:
        logger.exception("Checking collection failed")
        sys.exit(1)

    print(f"\nCollection: {services.collection_name}")
    print("\n=== Sample Documents ===")
    for idx, record in enumerate(records, start=1):
        print(f"\nDocument {idx}:")
        print("Source:", record.source_url or "<unknown>")
        print("Text length:", len(record.text))
        print("Text preview:", record.text[:PREVIEW_CHARS])
        print("---")


if __name__ == "__main__":
    main()
