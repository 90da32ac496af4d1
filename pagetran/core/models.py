"""
Core data models for PageTran.

Pages flow through the pipeline as immutable values: the extractor produces
``Page`` objects, the page translator turns each into a ``TranslatedPage`` and
the orchestrator gathers them into a ``PipelineResult`` for the renderer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Iterable, Optional, Dict, Any


@dataclass(frozen=True)
class Page:
    """One page of extracted source text."""
    index: int          # 1-based, unique per document
    source_text: str

    def __post_init__(self):
        if self.index < 1:
            raise ValueError(f"Page index must be >= 1, got {self.index}")

    @property
    def is_blank(self) -> bool:
        return not self.source_text.strip()


@dataclass(frozen=True)
class Chunk:
    """Bounded slice of a page's text, the unit sent to a backend."""
    text: str
    ordinal: int

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True)
class TranslatedPage:
    """Translation of one source page; ``index`` matches the source page."""
    index: int
    text: str


@dataclass
class PipelineResult:
    """
    Translated pages sorted by index, plus run statistics.

    Use ``collect`` to build one: it enforces exactly one translated page
    per source page.
    """
    pages: List[TranslatedPage]
    stats: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def collect(
        cls,
        translated: Iterable[TranslatedPage],
        expected_indices: Iterable[int],
        stats: Optional[Dict[str, Any]] = None
    ) -> PipelineResult:
        """
        Sort translated pages by index and check the index set.

        Raises:
            ValueError: if an index is missing, duplicated or unexpected
        """
        pages = sorted(translated, key=lambda p: p.index)
        expected = sorted(expected_indices)
        got = [p.index for p in pages]

        if len(set(got)) != len(got):
            duplicates = sorted({i for i in got if got.count(i) > 1})
            raise ValueError(f"Duplicate translated page indices: {duplicates}")
        if got != expected:
            missing = sorted(set(expected) - set(got))
            extra = sorted(set(got) - set(expected))
            raise ValueError(
                f"Translated pages do not match source pages "
                f"(missing={missing}, unexpected={extra})"
            )

        return cls(pages=pages, stats=dict(stats or {}))

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self):
        return iter(self.pages)
