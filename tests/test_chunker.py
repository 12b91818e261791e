import random
import string

import pytest

from f1gpt.indexing.chunker import chunk_document, split_text


def reconstruct(chunks, overlap):
    if not chunks:
        return ""
    return chunks[0] + "".join(chunk[overlap:] for chunk in chunks[1:])


def make_text(seed: int, paragraphs: int = 12) -> str:
    rng = random.Random(seed)
    out = []
    for _ in range(paragraphs):
        lines = []
        for _ in range(rng.randint(1, 4)):
            words = ["".join(rng.choices(string.ascii_lowercase, k=rng.randint(1, 12))) for _ in range(rng.randint(3, 30))]
            lines.append(" ".join(words))
        out.append("\n".join(lines))
    return "\n\n".join(out)


def test_example_ranges_without_separators():
    text = "".join(string.ascii_letters[i % 52] for i in range(1200))
    chunks = split_text(text, chunk_size=512, overlap=100)

    assert chunks == [text[0:512], text[412:924], text[824:1200]]


def test_short_text_is_single_chunk_without_overlap():
    text = "Lewis Hamilton won seven titles."
    assert split_text(text, chunk_size=512, overlap=100) == [text]


def test_empty_text_has_no_chunks():
    assert split_text("", chunk_size=512, overlap=100) == []


@pytest.mark.parametrize("seed", [1, 2, 3])
@pytest.mark.parametrize("chunk_size,overlap", [(512, 100), (200, 50), (64, 0), (100, 99)])
def test_chunks_reconstruct_input_text(seed, chunk_size, overlap):
    text = make_text(seed)
    chunks = split_text(text, chunk_size=chunk_size, overlap=overlap)

    assert len(chunks) > 1
    assert reconstruct(chunks, overlap) == text


@pytest.mark.parametrize("chunk_size,overlap", [(512, 100), (200, 50), (64, 0)])
def test_chunks_respect_size_bound(chunk_size, overlap):
    text = make_text(7)
    chunks = split_text(text, chunk_size=chunk_size, overlap=overlap)

    assert all(len(chunk) <= chunk_size for chunk in chunks)


def test_each_chunk_opens_with_tail_of_previous():
    text = make_text(11)
    chunks = split_text(text, chunk_size=150, overlap=30)

    for previous, current in zip(chunks, chunks[1:]):
        assert current[:30] == previous[-30:]


def test_prefers_paragraph_boundaries():
    text = "a" * 40 + "\n\n" + "b" * 40 + "\n\n" + "c" * 40
    chunks = split_text(text, chunk_size=90, overlap=0)

    assert chunks == ["a" * 40 + "\n\n" + "b" * 40 + "\n\n", "c" * 40]


def test_indivisible_unit_is_not_cut_without_character_fallback():
    word = "x" * 300
    text = "short words " + word + " tail"
    chunks = split_text(text, chunk_size=100, overlap=10, separators=("\n\n", "\n", " "))

    assert any(word in chunk for chunk in chunks)
    assert reconstruct(chunks, 10) == text


@pytest.mark.parametrize("chunk_size,overlap", [(0, 0), (10, -1), (10, 10), (10, 20)])
def test_rejects_invalid_parameters(chunk_size, overlap):
    with pytest.raises(ValueError):
        split_text("some text", chunk_size=chunk_size, overlap=overlap)


def test_chunk_document_numbers_chunks_in_order():
    text = make_text(5)
    chunks = chunk_document("https://example.com/f1", text, chunk_size=100, overlap=20)

    assert [c.sequence for c in chunks] == list(range(len(chunks)))
    assert {c.source_url for c in chunks} == {"https://example.com/f1"}
