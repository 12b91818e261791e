import pytest

from f1gpt.errors import MalformedRequestError
from f1gpt.models.schemas import ChatRequest, PartsMessage, TextMessage, resolve_text
from f1gpt.rag.pipeline import ChatService
from f1gpt.vector_store.base import StoredRecord

from conftest import FakeEmbeddingsClient, FakeLLMClient, unit

QUESTION = "Who won 2023?"
ANSWER_CHUNK = "Max Verstappen won the 2023 World Drivers' Championship."


def parse_messages(raw):
    return ChatRequest.model_validate({"messages": raw}).messages


def make_service(store, collection, embeddings, llm=None, top_k=5):
    return ChatService(
        embeddings_client=embeddings,
        vector_store=store,
        llm_client=llm or FakeLLMClient(),
        collection_name=collection,
        top_k=top_k,
    )


def test_flat_and_parts_messages_resolve_to_same_text():
    flat, parts = parse_messages(
        [
            {"role": "user", "content": QUESTION},
            {"role": "user", "parts": [{"type": "text", "text": "Who won "}, {"type": "image"}, {"type": "text", "text": "2023?"}]},
        ]
    )

    assert isinstance(flat, TextMessage)
    assert isinstance(parts, PartsMessage)
    assert resolve_text(flat) == resolve_text(parts) == QUESTION


def test_parts_take_precedence_over_content():
    [message] = parse_messages(
        [{"role": "user", "content": "ignored", "parts": [{"type": "text", "text": QUESTION}]}]
    )

    assert resolve_text(message) == QUESTION


def test_message_without_text_resolves_to_empty():
    bare, null_content = parse_messages([{"role": "user"}, {"role": "user", "content": None}])

    assert isinstance(bare, TextMessage)
    assert resolve_text(bare) == resolve_text(null_content) == ""
    assert ChatService.extract_query([bare]) == ""


def test_extract_query_uses_last_user_message():
    messages = parse_messages(
        [
            {"role": "user", "content": "Who won 2021?"},
            {"role": "assistant", "content": "Max Verstappen."},
            {"role": "user", "content": QUESTION},
            {"role": "assistant", "content": "Let me check."},
        ]
    )

    assert ChatService.extract_query(messages) == QUESTION


def test_extract_query_without_user_message_is_malformed():
    messages = parse_messages([{"role": "assistant", "content": "Hello"}])

    with pytest.raises(MalformedRequestError):
        ChatService.extract_query(messages)


def test_prepare_embeds_once_and_puts_retrieved_text_in_prompt(store, collection):
    embeddings = FakeEmbeddingsClient(pinned={QUESTION: unit([1.0, 0.0, 0.0])})
    store.insert(collection, StoredRecord(vector=unit([1.0, 0.0, 0.0]), text=ANSWER_CHUNK))
    store.insert(collection, StoredRecord(vector=unit([0.0, 0.0, 1.0]), text="Monaco is a street circuit."))
    service = make_service(store, collection, embeddings, top_k=1)

    prepared = service.prepare(parse_messages([{"role": "user", "content": QUESTION}]))

    assert embeddings.calls == [QUESTION]
    assert prepared.context == ANSWER_CHUNK
    assert "START CONTEXT\n" + ANSWER_CHUNK + "\nEND CONTEXT" in prepared.system_prompt
    assert "Formula One" in prepared.system_prompt


def test_context_joins_results_in_rank_order(store, collection):
    embeddings = FakeEmbeddingsClient(pinned={QUESTION: unit([1.0, 0.0, 0.0])})
    store.insert(collection, StoredRecord(vector=unit([0.5, 0.5, 0.0]), text="second"))
    store.insert(collection, StoredRecord(vector=unit([1.0, 0.0, 0.0]), text="first"))
    service = make_service(store, collection, embeddings, top_k=2)

    prepared = service.prepare(parse_messages([{"role": "user", "content": QUESTION}]))

    assert prepared.context == "first\n\nsecond"


def test_empty_collection_gives_empty_context(store, collection):
    service = make_service(store, collection, FakeEmbeddingsClient())

    prepared = service.prepare(parse_messages([{"role": "user", "content": QUESTION}]))

    assert prepared.results == []
    assert prepared.context == ""
    assert "START CONTEXT\n\nEND CONTEXT" in prepared.system_prompt


def test_blank_query_skips_embedding(store, collection):
    embeddings = FakeEmbeddingsClient()
    service = make_service(store, collection, embeddings)

    prepared = service.prepare(parse_messages([{"role": "user", "content": "   "}]))

    assert embeddings.calls == []
    assert prepared.context == ""


@pytest.mark.asyncio
async def test_generation_receives_history_and_system_prompt(store, collection):
    llm = FakeLLMClient()
    service = make_service(store, collection, FakeEmbeddingsClient(), llm=llm)
    messages = parse_messages(
        [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "parts": [{"type": "text", "text": "Hello"}]},
            {"role": "tool", "content": "ignored"},
            {"role": "user", "content": QUESTION},
        ]
    )

    prepared = service.prepare(messages)
    tokens = await service.stream_answer(messages, prepared)

    assert "".join([token async for token in tokens]) == "Max Verstappen won."
    [call] = llm.calls
    assert call["system_prompt"] == prepared.system_prompt
    assert call["messages"] == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello"},
        {"role": "user", "content": QUESTION},
    ]
