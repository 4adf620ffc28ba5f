"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project root (ragchat package lives one level below)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent

# Reference document (PDF or plain text). Relative paths resolve against PROJECT_ROOT.
DOCUMENT_PATH: str = (
    os.getenv("DOCUMENT_PATH", "data/employee_handbook.pdf").strip()
    or "data/employee_handbook.pdf"
)

# Chunking / retrieval
CHUNK_SIZE: int = int(os.getenv("CHUNK_SIZE", "800"))
RETRIEVAL_TOP_K: int = int(os.getenv("RETRIEVAL_TOP_K", "3"))

# Prompt wording
ORG_NAME: str = os.getenv("ORG_NAME", "Contoso Electronics").strip() or "Contoso Electronics"

# Sessions
DEFAULT_SESSION_ID: str = "default"

# Azure OpenAI (preferred when endpoint, key and deployment are all set)
AZURE_OPENAI_ENDPOINT: str = os.getenv("AZURE_OPENAI_ENDPOINT", "").strip()
AZURE_OPENAI_API_KEY: str = os.getenv("AZURE_OPENAI_API_KEY", "").strip()
AZURE_OPENAI_DEPLOYMENT: str = os.getenv("AZURE_OPENAI_DEPLOYMENT", "").strip()
AZURE_OPENAI_API_VERSION: str = (
    os.getenv("AZURE_OPENAI_API_VERSION", "2024-08-01-preview").strip() or "2024-08-01-preview"
)

# OpenAI
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)

# Hugging Face router chat (fallback when no OpenAI backend is configured)
HF_API_KEY: str = os.getenv("HF_API_KEY", "").strip()
HF_CHAT_URL: str = "https://router.huggingface.co/v1/chat/completions"
HF_LLM_MODEL: str = (
    os.getenv("HF_LLM_MODEL", "meta-llama/Llama-3.2-3B-Instruct").strip()
    or "meta-llama/Llama-3.2-3B-Instruct"
)

# Generation settings
LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "1.0"))
LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "4096"))

# API timeouts (seconds)
LLM_API_TIMEOUT: float = float(os.getenv("LLM_API_TIMEOUT", "60"))

# Agent graph
MAX_AGENTIC_ROUNDS: int = int(os.getenv("MAX_AGENTIC_ROUNDS", "6"))
AGENT_MAX_TOKENS: int = int(os.getenv("AGENT_MAX_TOKENS", "512"))

# HTTP server
PORT: int = int(os.getenv("PORT", "3001"))

# Streamlit UI -> backend
API_BASE: str = os.getenv("API_BASE", f"http://localhost:{PORT}").strip()


def resolve_document_path(path: str | None = None) -> Path:
    """Absolute path of the reference document (relative paths are taken from the project root)."""
    p = Path(path or DOCUMENT_PATH)
    return p if p.is_absolute() else PROJECT_ROOT / p
