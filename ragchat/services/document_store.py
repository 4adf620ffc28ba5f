"""
Reference document cache: load the handbook once, chunk it, keep it for the
lifetime of the store.

Responsibility: Lazy, idempotent, single-flight loading. A missing document is not
an error; callers get LoadResult.NOT_FOUND and retrieval proceeds with no chunks.
"""

import logging
import threading
from enum import Enum
from pathlib import Path

from ragchat.core.config import CHUNK_SIZE, resolve_document_path
from ragchat.ingest.loader import read_document
from ragchat.services.text_processing import chunk_words

logger = logging.getLogger(__name__)


class LoadResult(str, Enum):
    LOADED = "loaded"
    NOT_FOUND = "not_found"


class DocumentStore:
    """Holds the document text and its ordered chunks once loaded."""

    def __init__(self, path: Path | str | None = None, chunk_size: int = CHUNK_SIZE) -> None:
        self.path = resolve_document_path(str(path) if path is not None else None)
        self.chunk_size = chunk_size
        self._text: str | None = None
        self._chunks: tuple[str, ...] = ()
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._text is not None

    @property
    def text(self) -> str | None:
        return self._text

    @property
    def chunks(self) -> tuple[str, ...]:
        return self._chunks

    def ensure_loaded(self) -> LoadResult:
        """
        Load and chunk the document on first call; later calls are no-ops.

        Concurrent first calls wait on the lock, so the file is read and chunked exactly
        once. A missing file is not cached: the next call checks again.
        """
        if self._text is not None:
            return LoadResult.LOADED
        with self._lock:
            if self._text is not None:
                return LoadResult.LOADED
            logger.info("[document_store:ensure_loaded] IN  path=%s", self.path)
            text = read_document(self.path)
            if text is None:
                logger.warning("[document_store:ensure_loaded] document not found: %s", self.path)
                return LoadResult.NOT_FOUND
            chunks = tuple(chunk_words(text, chunk_size=self.chunk_size))
            # Publish chunks before text: readers check _text first.
            self._chunks = chunks
            self._text = text
            logger.info(
                "[document_store:ensure_loaded] OUT text_len=%d chunks=%d chunk_size=%d",
                len(text), len(chunks), self.chunk_size,
            )
            return LoadResult.LOADED

    def reset(self) -> None:
        """Drop the cached document so the next ensure_loaded() reads it again."""
        with self._lock:
            self._text = None
            self._chunks = ()
