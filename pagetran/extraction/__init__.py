"""Document extraction module."""

from .pdf_parser import PDFParser, normalize_page_text

__all__ = ['PDFParser', 'normalize_page_text']
