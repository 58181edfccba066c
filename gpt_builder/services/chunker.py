# gpt_builder/services/chunker.py

from typing import List

from gpt_builder.utils.logging import logger

PARAGRAPH_SEPARATOR = "\n\n"
MIN_CHUNK_CHARS = 50
MAX_CHUNKS = 20


def decode_document(raw: bytes) -> str:
    """
    Decode an uploaded file as UTF-8 text. Invalid bytes become U+FFFD.
    No format-specific parsing: a PDF or DOCX comes through as its raw bytes.
    """
    text = raw.decode("utf-8", errors="replace")
    logger.info(f"Decoded upload: {len(raw)} bytes -> {len(text)} characters")
    return text


def split_paragraphs(text: str) -> List[str]:
    """
    Split on blank lines, drop segments of MIN_CHUNK_CHARS or fewer
    (after trimming whitespace) and keep the first MAX_CHUNKS in order.
    Segments are returned untrimmed.
    """
    if not text:
        logger.warning("split_paragraphs called with empty text")
        return []

    segments = text.split(PARAGRAPH_SEPARATOR)
    chunks = [s for s in segments if len(s.strip()) > MIN_CHUNK_CHARS][:MAX_CHUNKS]

    logger.info(f"Created {len(chunks)} chunks from {len(segments)} paragraph candidates")
    return chunks
