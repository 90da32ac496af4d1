"""
PageTran: PDF document translation with LLM backends.

Extracts the text of each page, translates pages concurrently (with retry on
rate limits and server errors) and rebuilds a plain-text PDF in the target
language.

Usage:
    from pagetran import TranslationPipeline, PipelineConfig

    config = PipelineConfig(source_lang="en", target_lang="th", backend="gemini")
    pipeline = TranslationPipeline(config)
    pdf_bytes = pipeline.translate_pdf_sync(open("paper.pdf", "rb").read())
"""

__version__ = "1.0.0"
__author__ = "PageTran Team"
__license__ = "MIT"

from pagetran.core.models import Page, Chunk, TranslatedPage, PipelineResult
from pagetran.core.exceptions import (
    PageTranError,
    BackendError,
    ExtractionError,
    RenderingError,
    ConfigurationError,
    PipelineError,
)
from pagetran.core.retry import RetryPolicy, with_retry
from pagetran.core.scheduler import run_bounded
from pagetran.core.pipeline import TranslationPipeline, PipelineConfig
from pagetran.translation.base import TranslationBackend, TranslationRequest, TranslationResponse
from pagetran.translation.chunker import chunk_text

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "Page", "Chunk", "TranslatedPage", "PipelineResult",
    "PageTranError", "BackendError", "ExtractionError", "RenderingError",
    "ConfigurationError", "PipelineError",
    "RetryPolicy", "with_retry", "run_bounded",
    "TranslationPipeline", "PipelineConfig",
    "TranslationBackend", "TranslationRequest", "TranslationResponse",
    "chunk_text",
]
