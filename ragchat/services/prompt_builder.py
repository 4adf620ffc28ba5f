"""
Prompt composition: system instruction + prior turns + the new user message.

The system instruction depends on whether retrieval is enabled and whether it
found anything. History only ever contains previous turns.
"""

from collections.abc import Sequence
from enum import Enum

from ragchat.core.config import ORG_NAME
from ragchat.core.messages import Message, system, user


class ChatMode(str, Enum):
    BASIC = "basic"
    AGENT = "agent"

    @classmethod
    def parse(cls, value: object) -> "ChatMode":
        """'agent' selects the agent; anything else (including None) is basic."""
        return cls.AGENT if value == cls.AGENT.value else cls.BASIC


GENERIC_SYSTEM_PROMPT = (
    "You are a helpful and knowledgeable assistant. "
    "Answer the user's questions concisely and informatively."
)
EXCERPTS_START = "--- EMPLOYEE HANDBOOK EXCERPTS ---"
EXCERPTS_END = "--- END OF EXCERPTS ---"
REFUSAL_SENTENCE = (
    "I'm sorry, I don't know. The employee handbook does not contain information about that."
)


def grounded_system_prompt(chunks: Sequence[str], org_name: str = ORG_NAME) -> str:
    context = "\n\n".join(chunks)
    return (
        f"You are a helpful assistant for {org_name}. "
        "You must ONLY use the information provided below to answer.\n\n"
        f"{EXCERPTS_START}\n{context}\n{EXCERPTS_END}"
    )


def refusal_system_prompt(org_name: str = ORG_NAME) -> str:
    return (
        f"You are a helpful assistant for {org_name}. "
        "The excerpts do not contain relevant information for this question. "
        f'Reply politely: "{REFUSAL_SENTENCE}"'
    )


def build_system_message(rag_enabled: bool, chunks: Sequence[str], org_name: str = ORG_NAME) -> Message:
    if not rag_enabled:
        return system(GENERIC_SYSTEM_PROMPT)
    if chunks:
        return system(grounded_system_prompt(chunks, org_name))
    return system(refusal_system_prompt(org_name))


def compose_messages(
    mode: ChatMode,
    rag_enabled: bool,
    chunks: Sequence[str],
    history: Sequence[Message],
    user_message: str,
    org_name: str = ORG_NAME,
) -> list[Message]:
    """[system] + history + [user]. Agent mode never builds a prompt here."""
    if mode is ChatMode.AGENT:
        raise ValueError("agent mode does not use composed prompts")
    return [build_system_message(rag_enabled, chunks, org_name), *history, user(user_message)]
