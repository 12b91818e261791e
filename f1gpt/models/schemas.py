from __future__ import annotations

from typing import Annotated, List, Union

from pydantic import BaseModel, ConfigDict, Field


# Conversation
class MessagePart(BaseModel):
    """One part of a structured message; only "text" parts carry query text."""

    model_config = ConfigDict(extra="ignore")

    type: str
    text: str | None = None


class TextMessage(BaseModel):
    """Flat message shape: {role, content}."""

    model_config = ConfigDict(extra="ignore")

    role: str
    content: str | None = None


class PartsMessage(BaseModel):
    """Structured message shape: {role, parts: [...]}."""

    model_config = ConfigDict(extra="ignore")

    role: str
    parts: List[MessagePart]


# Tried in order: parts win when a message carries both shapes, and a bare {role} is a TextMessage.
ConversationMessage = Annotated[Union[PartsMessage, TextMessage], Field(union_mode="left_to_right")]


def resolve_text(message: ConversationMessage) -> str:
    """Text of a message: flat content as-is, or all text parts concatenated in order."""
    if isinstance(message, PartsMessage):
        return "".join(part.text or "" for part in message.parts if part.type == "text")
    return message.content or ""


# Chat
class ChatRequest(BaseModel):
    """Body of POST /chat."""

    messages: List[ConversationMessage] = Field(..., description="Conversation, oldest first")


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "MessagePart",
    "TextMessage",
    "PartsMessage",
    "ConversationMessage",
    "resolve_text",
    "ChatRequest",
    "ErrorResponse",
]
