"""
Agent tools: definitions and execution for tool-calling (agentic) mode.

Tools: search_handbook, current_date, calculator.
"""

import ast
import json
import logging
import operator
from datetime import datetime, timezone
from typing import Any

from ragchat.services.document_store import DocumentStore, LoadResult
from ragchat.services.retrieval_service import rank_chunks

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 3

# OpenAI function-calling format: list of tool definitions
AGENT_TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "search_handbook",
            "description": "Search the employee handbook by keywords. Use this for any question about company policies, benefits, or procedures. Returns the best matching excerpts with their position and match score.",
            "parameters": {
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query (keywords or natural language question). Words of 3 characters or fewer are ignored.",
                    }
                },
                "required": ["query"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "current_date",
            "description": "Get the current date and time (UTC). Use when the user asks about today, now, or time-sensitive information.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "calculator",
            "description": "Evaluate a simple math expression. Use for numeric calculations (e.g. vacation days accrued over 7 months: 2*7). Only numbers and + - * / ( ) . allowed.",
            "parameters": {
                "type": "object",
                "properties": {
                    "expression": {
                        "type": "string",
                        "description": "Math expression to evaluate (e.g. 2+3*4)",
                    }
                },
                "required": ["expression"],
            },
        },
    },
]


_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {ast.UAdd: operator.pos, ast.USub: operator.neg}


def _evaluate(node: ast.AST) -> float:
    """Walk an arithmetic expression tree; anything but numbers and + - * / is rejected."""
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_evaluate(node.left), _evaluate(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand))
    raise ValueError(f"unsupported element {node.__class__.__name__}")


def _safe_calculator(expression: str) -> str:
    """Evaluate an arithmetic expression (numbers, + - * /, parentheses). Errors come back as text."""
    expr = (expression or "").strip()
    if not expr:
        return "Error: empty expression"
    try:
        result = _evaluate(ast.parse(expr, mode="eval"))
    except RecursionError:
        return "Error: expression is nested too deeply"
    except ZeroDivisionError:
        return "Error: division by zero"
    except SyntaxError:
        return "Error: not a valid expression"
    except ValueError as e:
        return f"Error: {e}; only numbers and + - * / ( ) allowed"
    if isinstance(result, float) and result.is_integer():
        result = int(result)
    return str(result)


def _search_handbook(query: str, documents: DocumentStore) -> str:
    if documents.ensure_loaded() is LoadResult.NOT_FOUND:
        return "The employee handbook is not available."
    ranked = rank_chunks(query, documents.chunks)[:SEARCH_RESULT_LIMIT]
    if not ranked:
        return "No matching excerpts found."
    return "\n\n---\n\n".join(f"[chunk={s.index} score={s.score}]\n{s.text}" for s in ranked)


def execute_tool(name: str, arguments: dict[str, Any], documents: DocumentStore) -> str:
    """
    Execute a tool by name with the given arguments. Returns a string result for the LLM.
    """
    args = arguments or {}
    logger.info("[tools] execute_tool name=%r arguments=%r", name, args)

    if name == "search_handbook":
        query = (args.get("query") or "").strip()
        if not query:
            return "Error: query is required."
        return _search_handbook(query, documents)

    if name == "current_date":
        now = datetime.now(timezone.utc)
        return now.strftime("%Y-%m-%d %H:%M:%S UTC")

    if name == "calculator":
        expr = args.get("expression") or ""
        return _safe_calculator(expr)

    return f"Unknown tool: {name}"


def tool_call_message(content: str, tool_calls: list[dict[str, Any]]) -> dict[str, Any]:
    """Assistant message that records the model's tool calls (OpenAI wire format)."""
    return {
        "role": "assistant",
        "content": content or "",
        "tool_calls": [
            {"id": tc["id"], "type": "function", "function": {"name": tc["name"], "arguments": json.dumps(tc.get("arguments") or {})}}
            for tc in tool_calls
        ],
    }
