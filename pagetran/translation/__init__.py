"""Chunking, prompting and backend calls for page translation."""

from .base import TranslationBackend, TranslationRequest, TranslationResponse
from .chunker import chunk_text, iter_chunks
from .page_translator import PageTranslator

__all__ = [
    'TranslationBackend',
    'TranslationRequest',
    'TranslationResponse',
    'chunk_text',
    'iter_chunks',
    'PageTranslator',
]
