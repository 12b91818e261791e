"""
CLI to search the vector index with a text query.

Example:
    python -m scripts.search_query --query "Who won the 2023 championship?" --top-k 5
"""

from __future__ import annotations

import argparse
from typing import List

from f1gpt.config import load_settings, setup_logging
from f1gpt.services import build_services


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Search indexed chunks by text query.")
    parser.add_argument("--query", "-q", required=True, help="Query text")
    parser.add_argument("--top-k", type=int, default=5, help="How many results to return")
    parser.add_argument("--snippet", type=int, default=300, help="Snippet length")
    args = parser.parse_args(argv)

    setup_logging()
    services = build_services(load_settings())

    q_vec = services.embeddings_client.embed_text(args.query)
    results = services.vector_store.search(services.collection_name, q_vec, k=args.top_k)

    if not results:
        print("No results")
        return

    for idx, result in enumerate(results, start=1):
        text = result.record.text
        snippet = text[: args.snippet].replace("\n", " ")
        print(f"\n#{idx} score={result.score:.4f} source={result.record.source_url} seq={result.record.sequence}")
        print("text:", snippet + ("..." if len(text) > args.snippet else ""))


if __name__ == "__main__":
    main()
