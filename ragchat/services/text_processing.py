"""
Text processing for RAG: word-aligned chunking.

Chunks are packed greedily from whitespace-delimited words, so no chunk boundary
ever splits a word. There is no overlap between consecutive chunks.
"""

from ragchat.core.config import CHUNK_SIZE


def chunk_words(text: str, chunk_size: int = CHUNK_SIZE) -> list[str]:
    """
    Split text into chunks of at most chunk_size characters.

    Words are appended to the current chunk (separated by a single space) while the
    result stays within chunk_size; otherwise the current chunk is flushed and the
    word starts a new one. A word longer than chunk_size becomes its own chunk.
    """
    if not text or not text.strip():
        return []

    chunks: list[str] = []
    current = ""
    for word in text.split():
        if len(current + " " + word) <= chunk_size:
            current = f"{current} {word}" if current else word
        else:
            if current:
                chunks.append(current)
            current = word

    if current:
        chunks.append(current)

    return chunks
