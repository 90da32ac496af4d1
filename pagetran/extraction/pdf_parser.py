"""PDF text extraction with PyMuPDF."""

import re
import logging
import time
from pathlib import Path
from typing import List, Optional, Union

import fitz  # PyMuPDF

from ..core.exceptions import ExtractionError
from ..core.models import Page

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_page_text(text: str) -> str:
    """Collapse layout whitespace into single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


class PDFParser:
    """
    Extract plain text page by page.

    Layout is not kept: each page becomes one string with whitespace runs
    collapsed, numbered from 1 in document order.
    """

    def __init__(self, max_pages: Optional[int] = None):
        self.max_pages = max_pages

    def extract_pages(self, data: bytes) -> List[Page]:
        """
        Extract pages from PDF bytes.

        Raises:
            ExtractionError: if the bytes are not a readable PDF
        """
        start = time.time()
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(f"Cannot open PDF: {e}", original_error=e) from e

        try:
            if doc.needs_pass:
                raise ExtractionError("PDF is password protected")

            total_pages = len(doc)
            if total_pages == 0:
                raise ExtractionError("PDF has no pages")
            end_page = total_pages if self.max_pages is None else min(total_pages, self.max_pages)

            pages = []
            for page_num in range(end_page):
                try:
                    raw = doc[page_num].get_text("text")
                except RuntimeError as e:
                    raise ExtractionError(f"Cannot read page {page_num + 1}: {e}", original_error=e) from e
                pages.append(Page(index=page_num + 1, source_text=normalize_page_text(raw)))
        finally:
            doc.close()

        logger.info(f"Extracted {len(pages)} of {total_pages} pages in {time.time() - start:.2f}s")
        return pages

    def parse(self, pdf_path: Union[str, Path]) -> List[Page]:
        """Extract pages from a PDF file on disk."""
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")
        return self.extract_pages(pdf_path.read_bytes())
