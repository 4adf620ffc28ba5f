"""
Tests for environment-driven settings.
"""

import importlib
from collections.abc import Iterator

import pytest

from ragchat.core import config


@pytest.fixture
def reload_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    yield monkeypatch
    monkeypatch.undo()
    importlib.reload(config)


class TestConfig:
    def test_defaults(self, reload_config: pytest.MonkeyPatch) -> None:
        for key in ("CHUNK_SIZE", "RETRIEVAL_TOP_K", "LLM_API_TIMEOUT", "MAX_AGENTIC_ROUNDS", "PORT", "API_BASE"):
            reload_config.delenv(key, raising=False)
        importlib.reload(config)
        assert config.CHUNK_SIZE == 800
        assert config.RETRIEVAL_TOP_K == 3
        assert config.LLM_API_TIMEOUT == 60.0
        assert config.MAX_AGENTIC_ROUNDS == 6
        assert config.API_BASE == "http://localhost:3001"

    def test_tunables_read_from_env(self, reload_config: pytest.MonkeyPatch) -> None:
        reload_config.setenv("RETRIEVAL_TOP_K", "5")
        reload_config.setenv("LLM_API_TIMEOUT", "12.5")
        reload_config.setenv("MAX_AGENTIC_ROUNDS", "2")
        reload_config.setenv("AGENT_MAX_TOKENS", "256")
        reload_config.setenv("API_BASE", "http://backend:9000")
        importlib.reload(config)
        assert config.RETRIEVAL_TOP_K == 5
        assert config.LLM_API_TIMEOUT == 12.5
        assert config.MAX_AGENTIC_ROUNDS == 2
        assert config.AGENT_MAX_TOKENS == 256
        assert config.API_BASE == "http://backend:9000"

    def test_relative_document_path_resolves_against_project_root(self) -> None:
        assert config.resolve_document_path("data/x.pdf") == config.PROJECT_ROOT / "data" / "x.pdf"
