"""
API route aggregator: register endpoints; no logic, only delegate to handlers.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ragchat.api.handlers import handle_chat
from ragchat.core.context import AppContext
from ragchat.schemas.chat import ChatRequest, ChatResponse, ErrorResponse, HistoryMessage, SessionHistoryResponse

logger = logging.getLogger(__name__)
router = APIRouter()


def get_context(request: Request) -> AppContext:
    return request.app.state.context


# --- System ---

@router.get("/", tags=["system"])
def root():
    return {"status": "Handbook chat backend running"}


@router.get("/health", tags=["system"])
def health(context: AppContext = Depends(get_context)):
    return {"ok": True, "document_loaded": context.documents.loaded, "chunks": len(context.documents.chunks)}


# --- Chat ---

@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["chat"],
    summary="Ask a question (optionally grounded in the employee handbook)",
    description="Send a message; receive reply and the handbook excerpts used. 400 on invalid input, 500 on model failure.",
)
def post_chat(body: ChatRequest, context: AppContext = Depends(get_context)) -> ChatResponse | JSONResponse:
    logger.info("[api:post_chat] IN  session_id=%s mode=%s use_rag=%s", body.session_id, body.mode, body.use_rag)
    return handle_chat(body, context)


# --- Sessions ---

@router.get(
    "/sessions/{session_id}",
    response_model=SessionHistoryResponse,
    tags=["sessions"],
    summary="Chat history stored for a session",
)
def get_session(session_id: str, context: AppContext = Depends(get_context)) -> SessionHistoryResponse:
    messages = context.sessions.get_history(session_id)
    return SessionHistoryResponse(
        session_id=session_id,
        messages=[HistoryMessage(role=m.role.value, content=m.content) for m in messages],
    )


@router.delete("/sessions/{session_id}", tags=["sessions"], summary="Forget a session's chat history")
def delete_session(session_id: str, context: AppContext = Depends(get_context)) -> dict:
    return {"cleared": context.sessions.clear(session_id)}
