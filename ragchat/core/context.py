"""
App context: the process state every request handler works against.

Owns the document cache, the chat session store, the chat model and the agent.
Built once per FastAPI app (see ragchat.main.create_app); tests build their own
with fake model/agent collaborators.
"""

from dataclasses import dataclass
from pathlib import Path

from ragchat.agent.graph import Agent, AgentService
from ragchat.agent.llm import ChatModel, OpenAIChatModel
from ragchat.core.session_store import SessionStore
from ragchat.services.chat_service import ChatOrchestrator
from ragchat.services.document_store import DocumentStore


@dataclass
class AppContext:
    documents: DocumentStore
    sessions: SessionStore
    chat_model: ChatModel
    agent: Agent

    @property
    def orchestrator(self) -> ChatOrchestrator:
        return ChatOrchestrator(
            documents=self.documents,
            sessions=self.sessions,
            chat_model=self.chat_model,
            agent=self.agent,
        )


def build_context(
    document_path: Path | str | None = None,
    chat_model: ChatModel | None = None,
    agent: Agent | None = None,
) -> AppContext:
    """Context wired with the configured document path, OpenAI chat model and LangGraph agent."""
    documents = DocumentStore(document_path)
    return AppContext(
        documents=documents,
        sessions=SessionStore(),
        chat_model=chat_model if chat_model is not None else OpenAIChatModel(),
        agent=agent if agent is not None else AgentService(documents),
    )
