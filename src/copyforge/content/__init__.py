"""Content domain: generation parameters, prompts, chunks and history.

The pure core lives here: ``build_prompt`` turns parameters into a prompt,
``parse_chunks`` splits a response into sections and
``reassemble_chunks`` joins edited sections back into raw markdown.
"""

from copyforge.content.chunks import (
    DEFAULT_TITLE,
    parse_chunks,
    reassemble_chunks,
    remove_chunk,
    replace_chunk_body,
)
from copyforge.content.history import HistoryStore
from copyforge.content.models import (
    ContentChunk,
    GenerationParameters,
    HistoryRecord,
    ProductImage,
)
from copyforge.content.prompts import build_improvement_prompt, build_prompt

__all__ = [
    "DEFAULT_TITLE",
    "ContentChunk",
    "GenerationParameters",
    "HistoryRecord",
    "HistoryStore",
    "ProductImage",
    "build_improvement_prompt",
    "build_prompt",
    "parse_chunks",
    "reassemble_chunks",
    "remove_chunk",
    "replace_chunk_body",
]
