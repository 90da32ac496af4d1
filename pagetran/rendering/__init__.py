"""PDF reconstruction and font resolution."""

from .pdf_renderer import (
    PDFRenderer,
    LayoutSettings,
    DocumentWriter,
    FitzDocumentWriter,
    split_paragraphs,
    wrap_paragraph,
)
from .font_resolver import FontResolver

__all__ = [
    'PDFRenderer',
    'LayoutSettings',
    'DocumentWriter',
    'FitzDocumentWriter',
    'split_paragraphs',
    'wrap_paragraph',
    'FontResolver',
]
