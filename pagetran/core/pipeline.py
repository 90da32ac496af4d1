"""
Pipeline orchestrator for PageTran.

Runs extraction, bounded-concurrency page translation and PDF reconstruction
in sequence. Any stage failure aborts the run and is reported as a single
``PipelineError``; a partial document is never returned.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional, Callable, Any
from pathlib import Path
import asyncio
import logging
import time

from pagetran.core.exceptions import ConfigurationError, PipelineError
from pagetran.core.models import Page, TranslatedPage, PipelineResult
from pagetran.core.retry import RetryPolicy
from pagetran.core.scheduler import run_bounded
from pagetran.extraction.pdf_parser import PDFParser
from pagetran.rendering.font_resolver import FontResolver
from pagetran.rendering.pdf_renderer import PDFRenderer, LayoutSettings
from pagetran.translation.base import TranslationBackend
from pagetran.translation.page_translator import PageTranslator

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Complete configuration for the translation pipeline."""

    # Language settings
    source_lang: str = "en"
    target_lang: str = "th"

    # Translation backend
    backend: str = "gemini"  # gemini, openai, anthropic, ollama, local
    model_name: Optional[str] = None
    api_key: Optional[str] = None

    # Scheduling and retry
    max_concurrent_pages: int = 3
    chunk_size: int = 4000  # characters per backend request
    max_retries: int = 4
    retry_base_delay: float = 0.8  # seconds
    retry_max_jitter: float = 0.2  # seconds

    # Extraction
    max_pages: Optional[int] = None

    # Fonts
    font_path: Optional[Path] = None
    font_cache_dir: Optional[Path] = None
    download_fonts: bool = True
    subset_fonts: bool = True

    # Output layout (PDF points)
    page_width: float = 595.28
    page_height: float = 841.89
    margin_x: float = 40
    margin_y: float = 50
    font_size: float = 12
    line_pitch: float = 18
    wrap_width: int = 100

    # Server
    upload_dir: Path = field(default_factory=lambda: Path("uploads"))

    log_level: str = "INFO"

    def validate(self) -> List[str]:
        """Validate configuration and return any issues."""
        issues = []

        if self.max_concurrent_pages < 1:
            issues.append("max_concurrent_pages must be at least 1")
        if self.chunk_size < 1:
            issues.append("chunk_size must be at least 1")
        if self.max_retries < 0:
            issues.append("max_retries must be non-negative")
        if self.retry_base_delay <= 0:
            issues.append("retry_base_delay must be positive")
        if self.retry_max_jitter < 0:
            issues.append("retry_max_jitter must be non-negative")
        if self.max_pages is not None and self.max_pages < 1:
            issues.append("max_pages must be at least 1")
        if self.wrap_width < 1:
            issues.append("wrap_width must be at least 1")
        if self.line_pitch <= 0 or self.font_size <= 0:
            issues.append("line_pitch and font_size must be positive")
        if 2 * self.margin_y >= self.page_height:
            issues.append("margin_y leaves no room on the page")
        if self.font_path is not None and not Path(self.font_path).exists():
            issues.append(f"font_path does not exist: {self.font_path}")

        return issues

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            retries=self.max_retries,
            base_delay=self.retry_base_delay,
            max_jitter=self.retry_max_jitter
        )

    def layout(self) -> LayoutSettings:
        return LayoutSettings(
            page_width=self.page_width,
            page_height=self.page_height,
            margin_x=self.margin_x,
            margin_y=self.margin_y,
            font_size=self.font_size,
            line_pitch=self.line_pitch,
            wrap_width=self.wrap_width
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("api_key", None)
        return {k: str(v) if isinstance(v, Path) else v for k, v in data.items()}


class TranslationPipeline:
    """
    Extract → translate (bounded concurrency) → reconstruct.

    Collaborators can be injected; by default the backend named in the
    config, a PyMuPDF extractor and a PyMuPDF renderer are created.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        backend: Optional[TranslationBackend] = None,
        extractor: Optional[PDFParser] = None,
        renderer: Optional[PDFRenderer] = None,
        progress_callback: Optional[Callable[[float, str], None]] = None,
        sleep: Optional[Callable[[float], Any]] = None
    ):
        self.config = config or PipelineConfig()
        self.progress_callback = progress_callback

        issues = self.config.validate()
        if issues:
            raise ConfigurationError(f"Configuration issues: {', '.join(issues)}")

        self.backend = backend or self._create_translator()
        self.extractor = extractor or PDFParser(max_pages=self.config.max_pages)
        self._renderer = renderer
        self.page_translator = PageTranslator(
            self.backend,
            source_lang=self.config.source_lang,
            target_lang=self.config.target_lang,
            chunk_size=self.config.chunk_size,
            retry_policy=self.config.retry_policy(),
            sleep=sleep
        )

        self.stats: Dict[str, Any] = {
            'runs': 0,
            'runs_failed': 0,
            'pages_extracted': 0,
            'last_duration': 0.0
        }

    def _create_translator(self) -> TranslationBackend:
        from pagetran.translation.backends import create_backend
        logger.info(f"Using backend '{self.config.backend}' (model: {self.config.model_name or 'default'})")
        return create_backend(self.config.backend, api_key=self.config.api_key, model=self.config.model_name)

    @property
    def renderer(self) -> PDFRenderer:
        """Renderer, created on first use so fonts are only resolved when needed."""
        if self._renderer is None:
            self._renderer = PDFRenderer(
                layout=self.config.layout(),
                font_path=self._resolve_font(),
                subset_fonts=self.config.subset_fonts
            )
        return self._renderer

    def _resolve_font(self) -> Optional[str]:
        if self.config.font_path:
            return str(self.config.font_path)
        resolver = FontResolver(
            cache_dir=self.config.font_cache_dir,
            download_enabled=self.config.download_fonts
        )
        font = resolver.get_font_for_language(self.config.target_lang)
        if font is None:
            logger.info(f"No dedicated font for '{self.config.target_lang}', using built-in Helvetica")
        return str(font) if font else None

    def _render(self, pages: List[TranslatedPage]) -> bytes:
        return self.renderer.build(pages)

    def _report_progress(self, progress: float, message: str):
        if self.progress_callback:
            self.progress_callback(min(max(progress, 0.0), 1.0), message)

    async def translate_pages(self, pages: List[Page]) -> PipelineResult:
        """Translate extracted pages; results come back sorted by index."""
        start = time.time()
        tally = {"chunks_translated": 0, "retries": 0}

        def on_page_done(completed: int, total: int):
            self._report_progress(0.1 + 0.8 * completed / max(total, 1), f"Translated {completed}/{total} pages")

        translated: List[TranslatedPage] = await run_bounded(
            pages,
            self.config.max_concurrent_pages,
            lambda page: self.page_translator.translate_page(page, tally),
            progress_callback=on_page_done
        )

        stats = {
            "pages": len(pages),
            "chunks": tally["chunks_translated"],
            "retries": tally["retries"],
            "duration": time.time() - start
        }
        logger.info(
            f"Translated {stats['pages']} pages ({stats['chunks']} chunks, "
            f"{stats['retries']} retries) in {stats['duration']:.2f}s"
        )
        return PipelineResult.collect(translated, [p.index for p in pages], stats=stats)

    async def translate_pdf(self, data: bytes) -> bytes:
        """
        Translate a PDF given as bytes and return the rebuilt PDF.

        Extraction and rendering are blocking PyMuPDF work and run in the
        default executor so the event loop keeps serving other requests.

        Raises:
            PipelineError: wrapping the first failure of any stage
        """
        start = time.time()
        self.stats['runs'] += 1
        stage = "extract"
        try:
            self._report_progress(0.0, "Extracting text...")
            loop = asyncio.get_running_loop()
            pages = await loop.run_in_executor(None, self.extractor.extract_pages, data)
            self.stats['pages_extracted'] += len(pages)
            logger.info(f"Extracted {len(pages)} pages")

            stage = "translate"
            self._report_progress(0.1, f"Translating {len(pages)} pages...")
            result = await self.translate_pages(pages)

            stage = "render"
            self._report_progress(0.9, "Building PDF...")
            output = await loop.run_in_executor(None, self._render, result.pages)
        except Exception as e:
            self.stats['runs_failed'] += 1
            logger.error(f"Pipeline failed during {stage}: {e}")
            raise PipelineError(e, stage=stage) from e
        finally:
            self.stats['last_duration'] = time.time() - start

        self._report_progress(1.0, "Done")
        logger.info(f"Pipeline finished in {self.stats['last_duration']:.2f}s")
        return output

    def translate_pdf_sync(self, data: bytes) -> bytes:
        """Blocking wrapper around ``translate_pdf`` for scripts and the CLI."""
        return asyncio.run(self.translate_pdf(data))

    def translate_file(self, input_path: Path, output_path: Path) -> Path:
        """Translate a PDF file on disk and write the result."""
        data = Path(input_path).read_bytes()
        output = self.translate_pdf_sync(data)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(output)
        return output_path

    def get_statistics(self) -> Dict[str, Any]:
        """Run statistics for this pipeline instance."""
        stats = dict(self.stats)
        stats.update(self.page_translator.stats)
        stats["backend"] = self.backend.get_info()
        return stats
