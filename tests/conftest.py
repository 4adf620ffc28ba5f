"""
Shared fixtures: fake chat/agent collaborators and a context over a temp handbook.

No network: the chat model and agent are in-process fakes.
"""

from collections.abc import Sequence
from pathlib import Path

import pytest

from ragchat.agent.graph import AgentReply
from ragchat.agent.llm import ChatCompletion
from ragchat.core.context import AppContext
from ragchat.core.messages import Message
from ragchat.core.session_store import SessionStore
from ragchat.services.document_store import DocumentStore

HANDBOOK_TEXT = """
Vacation policy: employees accrue 2 days/month.
Sick leave: employees receive 10 paid sick days per year.
Remote work requires manager approval and a signed agreement.
"""


class FakeChatModel:
    """Records every prompt; replies with a fixed text or raises a configured error."""

    def __init__(self, reply: str = "model reply", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[list[Message]] = []

    def invoke(self, messages: Sequence[Message]) -> ChatCompletion:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return ChatCompletion(content=self.reply)


class FakeAgent:
    def __init__(self, reply: str = "agent reply", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def process_message(self, session_id: str, message: str) -> AgentReply:
        self.calls.append((session_id, message))
        if self.error is not None:
            raise self.error
        return AgentReply(reply=self.reply, tools_used=["search_handbook"])


@pytest.fixture
def handbook_path(tmp_path: Path) -> Path:
    path = tmp_path / "handbook.txt"
    path.write_text(HANDBOOK_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def agent() -> FakeAgent:
    return FakeAgent()


@pytest.fixture
def context(handbook_path: Path, chat_model: FakeChatModel, agent: FakeAgent) -> AppContext:
    # Small chunks: the first chunk is the vacation line plus "Sick leave:"
    return AppContext(
        documents=DocumentStore(handbook_path, chunk_size=60),
        sessions=SessionStore(),
        chat_model=chat_model,
        agent=agent,
    )
