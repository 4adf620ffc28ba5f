"""
Chat orchestration: validate → retrieve (optional) → agent or direct model call → remember.

Responsibility: Run one chat request end to end against the app context. Called by
the API; no HTTP here. Session memory is appended only after the model answered,
so a failed request never leaves a half-written turn behind.
"""

import logging
from dataclasses import dataclass, field

from ragchat.agent.graph import Agent
from ragchat.agent.llm import ChatModel
from ragchat.core.config import DEFAULT_SESSION_ID, ORG_NAME, RETRIEVAL_TOP_K
from ragchat.core.errors import DownstreamFailureError, InvalidInputError
from ragchat.core.session_store import SessionStore
from ragchat.services.document_store import DocumentStore, LoadResult
from ragchat.services.prompt_builder import ChatMode, compose_messages
from ragchat.services.retrieval_service import retrieve

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatTurnRequest:
    message: object
    use_rag: bool | None = True
    session_id: str | None = DEFAULT_SESSION_ID
    mode: str | None = ChatMode.BASIC.value


@dataclass(frozen=True)
class ChatResult:
    reply: str
    sources: list[str] = field(default_factory=list)


def validate_message(message: object) -> str:
    if not isinstance(message, str) or not message:
        raise InvalidInputError("Invalid or missing 'message'")
    return message


class ChatOrchestrator:
    """Ties document cache, retriever, session memory, prompt builder and LLM together."""

    def __init__(
        self,
        documents: DocumentStore,
        sessions: SessionStore,
        chat_model: ChatModel,
        agent: Agent,
        top_k: int = RETRIEVAL_TOP_K,
        org_name: str = ORG_NAME,
    ) -> None:
        self.documents = documents
        self.sessions = sessions
        self.chat_model = chat_model
        self.agent = agent
        self.top_k = top_k
        self.org_name = org_name

    def handle(self, request: ChatTurnRequest) -> ChatResult:
        """
        Raises InvalidInputError before touching any state when the message is unusable,
        and DownstreamFailureError for anything that goes wrong afterwards.
        """
        message = validate_message(request.message)
        use_rag = True if request.use_rag is None else bool(request.use_rag)
        session_id = request.session_id or DEFAULT_SESSION_ID
        mode = ChatMode.parse(request.mode)
        logger.info(
            "[chat:handle] IN  session_id=%s mode=%s use_rag=%s message=%r",
            session_id[:16], mode.value, use_rag, message,
        )
        try:
            if mode is ChatMode.AGENT:
                result = self._handle_agent(message, session_id, use_rag)
            else:
                result = self._handle_direct(message, session_id, use_rag)
        except Exception as e:
            logger.exception("[chat:handle] failed session_id=%s mode=%s", session_id[:16], mode.value)
            raise DownstreamFailureError(str(e) or e.__class__.__name__) from e
        logger.info("[chat:handle] OUT reply_len=%d sources=%d", len(result.reply), len(result.sources))
        return result

    def _retrieve(self, message: str) -> list[str]:
        if self.documents.ensure_loaded() is LoadResult.NOT_FOUND:
            return []
        return retrieve(message, self.documents.chunks, top_k=self.top_k)

    def _handle_agent(self, message: str, session_id: str, use_rag: bool) -> ChatResult:
        if use_rag:
            # Retrieval still runs in agent mode; its result is not returned.
            self._retrieve(message)
        reply = self.agent.process_message(session_id, message)
        return ChatResult(reply=reply.reply, sources=[])

    def _handle_direct(self, message: str, session_id: str, use_rag: bool) -> ChatResult:
        with self.sessions.session(session_id) as memory:
            history = self.sessions.load_history(memory)
            sources = self._retrieve(message) if use_rag else []
            messages = compose_messages(ChatMode.BASIC, use_rag, sources, history, message, self.org_name)
            response = self.chat_model.invoke(messages)
            self.sessions.append_turn(memory, message, response.content)
        return ChatResult(reply=response.content, sources=sources)
