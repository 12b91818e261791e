"""
CLI to drop the configured collection and every record in it.

Example:
    python -m scripts.clear_db
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
        services = build_services(load_settings())
        print("Deleting collection...")
        services.vector_store.drop_collection(services.collection_name)
    except Exception:
        logger.exception("Clearing collection failed")
        sys.exit(1)

    print(f"Collection {services.collection_name!r} deleted.")


if __name__ == "__main__":
    main()
