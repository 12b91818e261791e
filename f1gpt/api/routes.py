from __future__ import annotations

import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

from f1gpt.models.schemas import ChatRequest
from f1gpt.rag.pipeline import ChatService

router = APIRouter()
logger = logging.getLogger(__name__)

GENERIC_ERROR = {"error": "Internal server error"}


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.services.chat_service()


async def relay_tokens(tokens: AsyncGenerator[str, None]) -> AsyncGenerator[str, None]:
    """
    Forward generated tokens to the client.

    Headers are already sent once this runs, so a mid-stream failure can only be
    logged and end the body. On client disconnect the task is cancelled and the
    generation stream is closed.
    """
    try:
        async for token in tokens:
            yield token
    except Exception:
        logger.exception("Generation stream failed after response start")
    finally:
        await tokens.aclose()


@router.post("/chat", summary="Answer a conversation with retrieved context")
async def chat(chat_request: ChatRequest, request: Request):
    service = get_chat_service(request)
    try:
        prepared = await run_in_threadpool(service.prepare, chat_request.messages)
        logger.info(
            "Chat request prepared",
            extra={"messages": len(chat_request.messages), "query_len": len(prepared.query), "context_len": len(prepared.context)},
        )
        tokens = await service.stream_answer(chat_request.messages, prepared)
    except Exception:
        logger.exception("Error in POST /chat", extra={"path": request.url.path})
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=GENERIC_ERROR)

    return StreamingResponse(relay_tokens(tokens), media_type="text/plain; charset=utf-8")


__all__ = ["router", "relay_tokens", "GENERIC_ERROR"]
