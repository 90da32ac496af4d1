# -*- coding: utf-8 -*-
"""
E2E Golden Path Test.

Runs the default collaborators end to end (PyMuPDF extraction, the local
echo backend, PyMuPDF reconstruction) and checks:
- Every source page produces at least one output page, in order
- Page text survives extraction, translation and reconstruction
- Long pages overflow onto extra output pages
"""

import pytest

from pagetran.core.pipeline import TranslationPipeline
from pagetran.translation.backends.local_backend import LocalBackend

from tests.fixtures.pdf_generator import read_page_texts


def test_two_page_document(mock_config, pdf_generator):
    pipeline = TranslationPipeline(mock_config)
    assert isinstance(pipeline.backend, LocalBackend)

    output = pipeline.translate_pdf_sync(pdf_generator.create_pdf(["Hello world", "Second page text"]))

    texts = read_page_texts(output)
    assert len(texts) == 2
    assert "Hello world" in texts[0]
    assert "Second page text" in texts[1]


def test_blank_page_keeps_its_slot(mock_config, pdf_generator):
    pipeline = TranslationPipeline(mock_config)

    output = pipeline.translate_pdf_sync(pdf_generator.create_pdf(["First", "", "Third"]))

    texts = read_page_texts(output)
    assert len(texts) == 3
    assert texts[1].strip() == ""
    assert "Third" in texts[2]


def test_long_page_overflows(mock_config, pdf_generator):
    """A page with more text than fits in one output page continues on the next."""
    lines = [f"Sentence number {i} of a long page." for i in range(40)]
    mock_config.wrap_width = 20
    pipeline = TranslationPipeline(mock_config)

    output = pipeline.translate_pdf_sync(pdf_generator.create_pdf(["\n".join(lines)]))

    texts = read_page_texts(output)
    assert len(texts) >= 2
    assert "Sentence number 0" in texts[0]
    assert "page." in texts[-1]
