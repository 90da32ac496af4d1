"""Split page text into size-bounded chunks at whitespace boundaries."""

import re
from typing import Iterator

from ..core.models import Chunk

_RUNS = re.compile(r"(\s+)")


def chunk_text(text: str, max_len: int) -> Iterator[str]:
    """
    Lazily split ``text`` into chunks of at most ``max_len`` characters.

    Chunks only break between whitespace and non-whitespace runs, so a word
    is never cut; a single word longer than ``max_len`` becomes its own
    over-long chunk. A trailing whitespace-only remainder is dropped, so
    empty or blank input yields nothing.
    """
    if max_len < 1:
        raise ValueError(f"max_len must be positive, got {max_len}")
    if not text:
        return

    buffer = ""
    for run in _RUNS.split(text):
        if not run:
            continue
        if buffer and len(buffer) + len(run) > max_len:
            yield buffer
            buffer = run
        else:
            buffer += run

    if buffer.strip():
        yield buffer


def iter_chunks(text: str, max_len: int) -> Iterator[Chunk]:
    """Like ``chunk_text`` but yields numbered ``Chunk`` objects."""
    for ordinal, piece in enumerate(chunk_text(text, max_len)):
        yield Chunk(text=piece, ordinal=ordinal)
