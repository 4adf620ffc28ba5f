"""
API handlers: read request data, call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so services stay free of FastAPI/HTTP types.
"""

import logging

from fastapi.responses import JSONResponse

from ragchat.core.context import AppContext
from ragchat.core.errors import DownstreamFailureError, InvalidInputError
from ragchat.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from ragchat.services.chat_service import ChatTurnRequest

logger = logging.getLogger(__name__)

FAILURE_REPLY = "Sorry, I encountered an error. Please try again."


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, reply=FAILURE_REPLY)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def handle_chat(body: ChatRequest, context: AppContext) -> ChatResponse | JSONResponse:
    """
    Run the chat orchestrator; map InvalidInputError to 400 and DownstreamFailureError to 500.
    """
    request = ChatTurnRequest(
        message=body.message,
        use_rag=body.use_rag,
        session_id=body.session_id,
        mode=body.mode,
    )
    try:
        result = context.orchestrator.handle(request)
    except InvalidInputError as e:
        logger.info("[api:handle_chat] rejected: %s", e.message)
        return _error(400, e.message, e.message)
    except DownstreamFailureError as e:
        return _error(500, "Model call failed", e.message)
    return ChatResponse(reply=result.reply, sources=result.sources)
