"""
Chat LLM: Azure OpenAI or OpenAI (primary), Hugging Face router (fallback).

The backend is picked from config: Azure when endpoint, key and deployment are set;
otherwise OpenAI when OPENAI_API_KEY is set; otherwise the HF router. Failures are
raised, never turned into empty answers, so the caller can report them.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from openai import AzureOpenAI, OpenAI

from ragchat.core import config
from ragchat.core.errors import ServiceUnavailableError
from ragchat.core.messages import Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatCompletion:
    content: str


class ChatModel(Protocol):
    def invoke(self, messages: Sequence[Message]) -> ChatCompletion: ...


def _openai_client() -> tuple[OpenAI, str]:
    """Return (client, model name) for the configured OpenAI-compatible backend."""
    if config.AZURE_OPENAI_ENDPOINT and config.AZURE_OPENAI_API_KEY and config.AZURE_OPENAI_DEPLOYMENT:
        client = AzureOpenAI(
            azure_endpoint=config.AZURE_OPENAI_ENDPOINT,
            api_key=config.AZURE_OPENAI_API_KEY,
            api_version=config.AZURE_OPENAI_API_VERSION,
            timeout=config.LLM_API_TIMEOUT,
        )
        return client, config.AZURE_OPENAI_DEPLOYMENT
    if config.OPENAI_API_KEY:
        return OpenAI(api_key=config.OPENAI_API_KEY, timeout=config.LLM_API_TIMEOUT), config.OPENAI_LLM_MODEL
    raise ServiceUnavailableError("No OpenAI backend configured (set AZURE_OPENAI_* or OPENAI_API_KEY)")


def openai_configured() -> bool:
    return bool(
        (config.AZURE_OPENAI_ENDPOINT and config.AZURE_OPENAI_API_KEY and config.AZURE_OPENAI_DEPLOYMENT)
        or config.OPENAI_API_KEY
    )


def _complete(
    payload: list[dict[str, Any]],
    max_tokens: int,
    temperature: float,
    tools: list[dict[str, Any]] | None = None,
) -> tuple[str, Any]:
    """Run one (Azure) OpenAI chat completion. Returns (model name, first choice message or None)."""
    client, model = _openai_client()
    request: dict[str, Any] = {
        "model": model,
        "messages": payload,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if tools:
        request["tools"] = tools
    response = client.chat.completions.create(**request)
    return model, response.choices[0].message if response.choices else None


def _message_text(msg: Any) -> str:
    return ((msg.content if msg is not None else None) or "").strip()


def _parse_arguments(raw: Any) -> dict[str, Any]:
    """Tool-call arguments arrive as a JSON string; anything unparsable becomes {}."""
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw or "{}")
    except json.JSONDecodeError:
        logger.warning("[llm:tool_calls] unparsable arguments=%r", raw)
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _message_tool_calls(msg: Any) -> list[dict[str, Any]]:
    """Flatten SDK tool calls to {id, name, arguments} dicts."""
    calls = []
    for tc in getattr(msg, "tool_calls", None) or []:
        fn = getattr(tc, "function", None)
        if fn is None:
            continue
        calls.append({"id": tc.id or "", "name": fn.name or "", "arguments": _parse_arguments(fn.arguments)})
    return calls


def _call_openai(payload: list[dict[str, Any]], max_tokens: int, temperature: float) -> str:
    """Call (Azure) OpenAI chat completions. Returns generated text."""
    model, msg = _complete(payload, max_tokens, temperature)
    out = _message_text(msg)
    logger.info("[llm:openai] OUT model=%s response_len=%d", model, len(out))
    return out


def _call_hf(payload: list[dict[str, Any]], max_tokens: int, temperature: float) -> str:
    """Call Hugging Face router chat completions. Returns generated text."""
    if not config.HF_API_KEY:
        raise ServiceUnavailableError(
            "No LLM backend configured (set AZURE_OPENAI_*, OPENAI_API_KEY or HF_API_KEY)"
        )
    headers = {"Authorization": f"Bearer {config.HF_API_KEY}", "Content-Type": "application/json"}
    body = {
        "model": config.HF_LLM_MODEL,
        "messages": payload,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    with httpx.Client(timeout=config.LLM_API_TIMEOUT) as client:
        response = client.post(config.HF_CHAT_URL, json=body, headers=headers)
    if response.status_code != 200:
        raise RuntimeError(f"HF LLM error {response.status_code}: {response.text[:200]}")
    data = response.json()
    choices = data.get("choices") or []
    msg: dict = {}
    if choices and isinstance(choices[0], dict):
        msg = choices[0].get("message") or {}
    out = (msg.get("content") or "").strip()
    logger.info("[llm:hf] OUT model=%s response_len=%d", config.HF_LLM_MODEL, len(out))
    return out


class OpenAIChatModel:
    """Chat capability used by the orchestrator: messages in, completion text out."""

    def __init__(
        self,
        temperature: float = config.LLM_TEMPERATURE,
        max_tokens: int = config.LLM_MAX_TOKENS,
    ) -> None:
        self.temperature = temperature
        self.max_tokens = max_tokens

    def invoke(self, messages: Sequence[Message]) -> ChatCompletion:
        payload = [m.to_dict() for m in messages]
        logger.info("[llm:invoke] IN  messages=%d max_tokens=%d", len(payload), self.max_tokens)
        if openai_configured():
            out = _call_openai(payload, self.max_tokens, self.temperature)
        else:
            out = _call_hf(payload, self.max_tokens, self.temperature)
        if not out:
            raise RuntimeError("LLM returned an empty response")
        return ChatCompletion(content=out)


def chat_with_tools(
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]],
    max_tokens: int = config.AGENT_MAX_TOKENS,
    temperature: float = config.LLM_TEMPERATURE,
) -> tuple[str | None, list[dict[str, Any]] | None]:
    """
    One agent step against (Azure) OpenAI. Returns (content, tool_calls): tool_calls is
    None when the model answered directly. Only OpenAI backends support tools, so this
    raises ServiceUnavailableError when neither Azure nor OpenAI is configured.
    """
    logger.info("[llm:chat_with_tools] IN  messages=%d tools=%d", len(messages), len(tools))
    model, msg = _complete(messages, max_tokens, temperature, tools=tools)
    content = _message_text(msg) or None
    tool_calls = _message_tool_calls(msg) if msg is not None else []
    logger.info(
        "[llm:chat_with_tools] OUT model=%s content_len=%d tool_calls=%s",
        model, len(content or ""), [t["name"] for t in tool_calls],
    )
    return content, tool_calls or None
