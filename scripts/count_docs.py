"""
CLI to report how many records the collection holds.

Counts above COUNT_UPPER_BOUND are printed as "<bound>+".

Example:
    python -m scripts.count_docs
"""

from __future__ import annotations

import logging
import sys

from f1gpt.config import load_settings, setup_logging
from f1gpt.services import build_services


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings()
        services = build_services(settings)
        count = services.vector_store.count(services.collection_name, settings.count_upper_bound)
    except Exception:
        logger.exception("Counting documents failed")
        sys.exit(1)

    print(f"Documents in collection: {count}")


if __name__ == "__main__":
    main()
