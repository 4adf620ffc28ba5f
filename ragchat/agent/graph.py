"""
LangGraph agent: tool-calling loop (call_model -> run_tools -> call_model ... -> END).

Used for mode="agent". The agent keeps its own per-session memory, separate from
the basic chat history, and records a turn only after it produced an answer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, TypedDict

from langgraph.graph import END, StateGraph

from ragchat.agent.llm import chat_with_tools
from ragchat.agent.tools import AGENT_TOOLS, execute_tool, tool_call_message
from ragchat.core.config import AGENT_MAX_TOKENS, MAX_AGENTIC_ROUNDS, ORG_NAME
from ragchat.core.session_store import SessionStore
from ragchat.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "I couldn't complete the request."


class AgentState(TypedDict):
    messages: list  # OpenAI wire-format dicts, including tool calls/results
    pending_tool_calls: list
    tools_used: list
    rounds: int
    answer: str


@dataclass(frozen=True)
class AgentReply:
    reply: str
    tools_used: list[str] = field(default_factory=list)


class Agent(Protocol):
    def process_message(self, session_id: str, message: str) -> AgentReply: ...


def agent_system_prompt(org_name: str = ORG_NAME) -> str:
    return (
        f"You are a helpful assistant for {org_name} employees with access to a set of tools.\n\n"
        "Rule: for any question about company policies, benefits, or procedures you MUST call "
        "search_handbook first with a keyword query, and answer only from the excerpts it returns. "
        "If the handbook has nothing relevant, say so politely instead of guessing. "
        "Use calculator for arithmetic and current_date for anything time-sensitive.\n\n"
        "Provide a clear, concise final answer once you have sufficient information. Do not invoke "
        "additional tools after you have gathered what is needed to answer the question."
    )


def build_graph(documents: DocumentStore):
    """
    Build and compile the agent graph.
    call_model → (run_tools → call_model)* → END, at most MAX_AGENTIC_ROUNDS tool rounds.
    """

    def _call_model(state: AgentState) -> dict:
        messages = state["messages"]
        logger.info("[graph:call_model] IN  messages=%d rounds=%d", len(messages), state["rounds"])
        content, tool_calls = chat_with_tools(messages, AGENT_TOOLS, max_tokens=AGENT_MAX_TOKENS)
        if tool_calls:
            logger.info("[graph:call_model] OUT tool_calls=%s", [tc["name"] for tc in tool_calls])
            return {
                "messages": [*messages, tool_call_message(content or "", tool_calls)],
                "pending_tool_calls": tool_calls,
            }
        logger.info("[graph:call_model] OUT answer_len=%d", len(content or ""))
        return {"answer": content or "", "pending_tool_calls": []}

    def _run_tools(state: AgentState) -> dict:
        messages = list(state["messages"])
        tools_used = list(state["tools_used"])
        for tc in state["pending_tool_calls"]:
            name = tc.get("name", "")
            result = execute_tool(name, tc.get("arguments") or {}, documents)
            tools_used.append(name)
            messages.append({"role": "tool", "tool_call_id": tc.get("id", ""), "content": result})
        logger.info("[graph:run_tools] OUT tools_used=%s", tools_used)
        return {
            "messages": messages,
            "tools_used": tools_used,
            "pending_tool_calls": [],
            "rounds": state["rounds"] + 1,
        }

    def _route_after_model(state: AgentState) -> str:
        if state["pending_tool_calls"] and state["rounds"] < MAX_AGENTIC_ROUNDS:
            return "run_tools"
        return END

    graph = StateGraph(AgentState)
    graph.add_node("call_model", _call_model)
    graph.add_node("run_tools", _run_tools)
    graph.set_entry_point("call_model")
    graph.add_conditional_edges("call_model", _route_after_model, {"run_tools": "run_tools", END: END})
    graph.add_edge("run_tools", "call_model")
    return graph.compile()


class AgentService:
    """Agent capability: (session_id, message) -> reply, with its own session memory."""

    def __init__(self, documents: DocumentStore, sessions: SessionStore | None = None) -> None:
        self.documents = documents
        self.sessions = sessions if sessions is not None else SessionStore()
        self._graph = build_graph(documents)

    def process_message(self, session_id: str, message: str) -> AgentReply:
        logger.info("[agent:process_message] START session_id=%s message=%r", session_id[:16], message)
        with self.sessions.session(session_id) as memory:
            history = self.sessions.load_history(memory)
            messages: list[dict[str, Any]] = [{"role": "system", "content": agent_system_prompt()}]
            messages.extend(m.to_dict() for m in history)
            messages.append({"role": "user", "content": message})
            initial: AgentState = {
                "messages": messages,
                "pending_tool_calls": [],
                "tools_used": [],
                "rounds": 0,
                "answer": "",
            }
            final = self._graph.invoke(initial)
            answer = (final.get("answer") or "").strip() or FALLBACK_ANSWER
            tools_used = list(final.get("tools_used") or [])
            self.sessions.append_turn(memory, message, answer)
        logger.info("[agent:process_message] END tools_used=%s answer_len=%d", tools_used, len(answer))
        return AgentReply(reply=answer, tools_used=tools_used)
