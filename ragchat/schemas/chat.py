"""Schemas for the chat endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """
    Request body for POST /chat. History is stored server-side by sessionId.

    message is validated by the chat service (not here) so a missing or non-string
    message is reported as 400 with the standard error body.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: Any = Field(None, description="User question.")
    use_rag: bool | None = Field(True, alias="useRAG", description="Ground the answer in the employee handbook.")
    session_id: str | None = Field("default", alias="sessionId", description="Conversation id; history is kept per id.")
    mode: str | None = Field("basic", description="'basic' (direct model call) or 'agent' (tool-calling agent).")


class ChatResponse(BaseModel):
    """Response for POST /chat."""

    reply: str = Field(..., description="Assistant reply.")
    sources: list[str] = Field(default_factory=list, description="Handbook excerpts used as context (empty in agent mode).")


class ErrorResponse(BaseModel):
    """Body returned with 400/500."""

    error: str
    message: str
    reply: str


class HistoryMessage(BaseModel):
    role: str
    content: str


class SessionHistoryResponse(BaseModel):
    session_id: str
    messages: list[HistoryMessage] = Field(default_factory=list)
