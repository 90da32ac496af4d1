# -*- coding: utf-8 -*-
"""
Rebuild a paginated PDF from translated page text.

The layout is deliberately plain: every translated page starts a new output
page, paragraphs are wrapped to a fixed number of characters and drawn top to
bottom at a fixed line pitch, and a page that runs out of room continues on a
fresh output page.
"""

import logging
import re
import textwrap
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

import fitz  # PyMuPDF

from ..core.exceptions import RenderingError
from ..core.models import TranslatedPage

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")


@dataclass(frozen=True)
class LayoutSettings:
    """Page geometry in PDF points; y grows downwards from the top edge."""
    page_width: float = 595.28   # A4
    page_height: float = 841.89
    margin_x: float = 40
    margin_y: float = 50
    font_size: float = 12
    line_pitch: float = 18
    wrap_width: int = 100        # characters per line
    paragraph_gap: float = 0.5   # extra space after a paragraph, in line pitches

    @property
    def top(self) -> float:
        return self.margin_y

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin_y

    @property
    def lines_per_page(self) -> int:
        """Lines that fit between the margins of one page."""
        return int((self.bottom - self.top) // self.line_pitch) + 1


def split_paragraphs(text: str) -> List[str]:
    """Split text on blank lines."""
    return _PARAGRAPH_BREAK.split(text)


def wrap_paragraph(paragraph: str, width: int) -> List[str]:
    """
    Wrap a paragraph into lines of at most ``width`` characters.

    Single line breaks inside the paragraph are kept. Words longer than
    ``width`` (or scripts written without spaces) are broken by character
    count.
    """
    lines: List[str] = []
    for raw_line in paragraph.split("\n"):
        lines.extend(textwrap.wrap(raw_line, width=width, break_long_words=True))
    return lines


class DocumentWriter(ABC):
    """Output document the renderer draws into."""

    @abstractmethod
    def new_page(self, width: float, height: float) -> Any:
        """Append a page and return a handle for drawing on it."""

    @abstractmethod
    def draw_text(self, page: Any, x: float, y: float, text: str, size: float) -> None:
        """Draw one line with its baseline at (x, y)."""

    @abstractmethod
    def save(self) -> bytes:
        """Serialize the finished document."""


class FitzDocumentWriter(DocumentWriter):
    """
    PyMuPDF-backed writer.

    The font file is read once per document and registered on each page from
    the same buffer, so PyMuPDF embeds a single font object. Without a font
    file the built-in Helvetica is used.
    """

    FONT_NAME = "pagetran"

    def __init__(self, font_path: Optional[str] = None, subset_fonts: bool = True):
        self.font_path = str(font_path) if font_path else None
        self.subset_fonts = subset_fonts
        self.doc = fitz.open()

        if self.font_path:
            try:
                self.font_buffer = Path(self.font_path).read_bytes()
            except OSError as e:
                raise RenderingError(f"Cannot read font file: {e}", font_path=self.font_path) from e
            self.fontname = self.FONT_NAME
        else:
            self.font_buffer = None
            self.fontname = "helv"

    def new_page(self, width: float, height: float):
        page = self.doc.new_page(width=width, height=height)
        if self.font_buffer:
            page.insert_font(fontname=self.fontname, fontbuffer=self.font_buffer)
        return page

    def draw_text(self, page, x: float, y: float, text: str, size: float) -> None:
        page.insert_text(fitz.Point(x, y), text, fontsize=size, fontname=self.fontname)

    def save(self) -> bytes:
        try:
            if self.subset_fonts and self.font_buffer:
                self.doc.subset_fonts()
            return self.doc.tobytes(garbage=4, deflate=True)
        finally:
            self.doc.close()


@dataclass
class _Cursor:
    page: Any
    y: float


class PDFRenderer:
    """Lay out translated pages into a new PDF."""

    def __init__(
        self,
        layout: Optional[LayoutSettings] = None,
        font_path: Optional[str] = None,
        subset_fonts: bool = True,
        writer_factory: Optional[Callable[[], DocumentWriter]] = None
    ):
        self.layout = layout or LayoutSettings()
        self.font_path = font_path
        self.subset_fonts = subset_fonts
        self.writer_factory = writer_factory or (
            lambda: FitzDocumentWriter(self.font_path, self.subset_fonts)
        )

    def _new_page(self, writer: DocumentWriter) -> _Cursor:
        page = writer.new_page(self.layout.page_width, self.layout.page_height)
        return _Cursor(page=page, y=self.layout.top)

    def build(self, pages: Iterable[TranslatedPage]) -> bytes:
        """
        Render translated pages, in index order, to PDF bytes.

        A line whose baseline would fall below the bottom margin moves to a
        new output page. The paragraph gap is added without an overflow
        check; the next line's check handles it, so no glyph crosses the
        margin and no blank page is produced.
        """
        start = time.time()
        pages = sorted(pages, key=lambda p: p.index)
        if not pages:
            raise RenderingError("No pages to render")

        layout = self.layout
        writer = self.writer_factory()
        output_pages = 0

        for translated in pages:
            cursor = self._new_page(writer)
            output_pages += 1
            try:
                for paragraph in split_paragraphs(translated.text):
                    for line in wrap_paragraph(paragraph, layout.wrap_width):
                        if cursor.y > layout.bottom:
                            cursor = self._new_page(writer)
                            output_pages += 1
                        writer.draw_text(cursor.page, layout.margin_x, cursor.y, line, layout.font_size)
                        cursor.y += layout.line_pitch
                    cursor.y += layout.line_pitch * layout.paragraph_gap
            except RuntimeError as e:
                raise RenderingError(
                    f"Failed to draw page {translated.index}: {e}",
                    page=translated.index,
                    font_path=self.font_path
                ) from e

        try:
            data = writer.save()
        except RuntimeError as e:
            raise RenderingError(f"Failed to save PDF: {e}", font_path=self.font_path) from e

        logger.info(
            f"Rendered {len(pages)} translated pages into {output_pages} output pages "
            f"({len(data)} bytes) in {time.time() - start:.2f}s"
        )
        return data
