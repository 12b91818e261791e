"""
Text chunking utilities.

Recursive multi-separator splitting: text is cut on paragraph breaks, and any
piece still too large is cut again on line breaks, then spaces, then single
characters. Separators stay attached to the piece before them, so the pieces
always concatenate back to the input. Pieces are then packed greedily into
chunks; every chunk after the first opens with the last ``overlap`` characters
of its predecessor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

DEFAULT_CHUNK_SIZE = 512
DEFAULT_CHUNK_OVERLAP = 100
DEFAULT_SEPARATORS = ("\n\n", "\n", " ", "")


@dataclass(frozen=True)
class Chunk:
    text: str
    source_url: str
    sequence: int


def _split_keeping_separator(text: str, separator: str) -> List[str]:
    parts = text.split(separator)
    pieces = [part + separator for part in parts[:-1]]
    pieces.append(parts[-1])
    return [piece for piece in pieces if piece]


def _split_pieces(text: str, separators: Sequence[str], limit: int) -> List[str]:
    if len(text) <= limit:
        return [text]

    for index, separator in enumerate(separators):
        if separator == "":
            return list(text)
        if separator not in text:
            continue

        pieces: List[str] = []
        for part in _split_keeping_separator(text, separator):
            if len(part) <= limit:
                pieces.append(part)
            else:
                pieces.extend(_split_pieces(part, separators[index + 1 :], limit))
        return pieces

    # No separator left: keep the unit whole rather than cut it.
    return [text]


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    separators: Sequence[str] = DEFAULT_SEPARATORS,
) -> List[str]:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    if overlap < 0:
        raise ValueError("overlap must be >= 0")
    if overlap >= chunk_size:
        raise ValueError("overlap must be less than chunk_size")

    if not text:
        return []
    if len(text) <= chunk_size:
        return [text]

    # A piece must fit next to the overlap carried in from the previous chunk.
    pieces = _split_pieces(text, separators, chunk_size - overlap)

    chunks: List[str] = []
    body_start = 0
    body_len = 0

    def emit() -> None:
        lead = overlap if chunks else 0
        chunks.append(text[max(0, body_start - lead) : body_start + body_len])

    for piece in pieces:
        budget = chunk_size - (overlap if chunks else 0)
        if body_len and body_len + len(piece) > budget:
            emit()
            body_start += body_len
            body_len = 0
        body_len += len(piece)

    if body_len:
        emit()
    return chunks


def chunk_document(
    source_url: str,
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> List[Chunk]:
    return [
        Chunk(text=chunk_text, source_url=source_url, sequence=sequence)
        for sequence, chunk_text in enumerate(split_text(text, chunk_size, overlap))
    ]


__all__ = [
    "Chunk",
    "split_text",
    "chunk_document",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_CHUNK_OVERLAP",
    "DEFAULT_SEPARATORS",
]
