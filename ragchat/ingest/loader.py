# Minimal document loader. No embeddings, no vector DB, no chunking.
# Supports .pdf and plain text. Single place for "file/bytes → text".

import io
from pathlib import Path

from pypdf import PdfReader


def bytes_to_text(raw: bytes, filename: str) -> str:
    """
    Convert raw file bytes to text by extension. PDFs go through pypdf; anything
    else is decoded as UTF-8 (undecodable bytes replaced).
    """
    ext = Path(filename).suffix.lower() if filename else ""
    if ext == ".pdf":
        return _read_pdf(raw)
    return raw.decode("utf-8", errors="replace")


def _read_pdf(raw: bytes) -> str:
    reader = PdfReader(io.BytesIO(raw))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def read_document(path: Path) -> str | None:
    """Read the file at path as text. Returns None if the file does not exist."""
    if not path.is_file():
        return None
    return bytes_to_text(path.read_bytes(), path.name)
