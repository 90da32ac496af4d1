"""Translate one page: chunk its text and send chunks in order through the retrying invoker."""

import asyncio
import logging
from typing import Dict, List, Optional

from ..core.models import Page, TranslatedPage
from ..core.retry import RetryPolicy, with_retry
from .base import TranslationBackend, TranslationRequest
from .chunker import iter_chunks
from .prompts import build_translation_prompt, clean_translation_output

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"


class PageTranslator:
    """
    Translates pages chunk by chunk.

    Chunks of one page are sent strictly one after another so they can be
    rejoined in reading order; parallelism happens across pages, in the
    scheduler.
    """

    def __init__(
        self,
        backend: TranslationBackend,
        source_lang: str = "en",
        target_lang: str = "th",
        chunk_size: int = 4000,
        retry_policy: Optional[RetryPolicy] = None,
        sleep=None
    ):
        self.backend = backend
        self.source_lang = source_lang
        self.target_lang = target_lang
        self.chunk_size = chunk_size
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep or asyncio.sleep

        self.stats = {
            "pages_translated": 0,
            "chunks_translated": 0,
            "retries": 0,
            "tokens_used": 0
        }

    def _bump(self, tally: Optional[Dict[str, int]], key: str, amount: int = 1):
        self.stats[key] += amount
        if tally is not None:
            tally[key] = tally.get(key, 0) + amount

    async def translate_chunk(self, text: str, tally: Optional[Dict[str, int]] = None) -> str:
        """
        Translate one chunk, retrying transient backend failures.

        ``tally`` receives the retries and tokens of this call on top of the
        translator-wide ``stats``, so one caller can count its own run.
        """
        system_prompt, user_prompt = build_translation_prompt(text, self.source_lang, self.target_lang)
        request = TranslationRequest(
            text=text,
            source_lang=self.source_lang,
            target_lang=self.target_lang,
            system_prompt=system_prompt,
            user_prompt=user_prompt
        )

        response = await with_retry(
            lambda: self.backend.translate(request),
            self.retry_policy,
            sleep=self.sleep,
            on_retry=lambda retry_no, outcome: self._bump(tally, "retries")
        )
        self._bump(tally, "tokens_used", response.tokens_used or 0)
        return clean_translation_output(response.text)

    async def translate_page(self, page: Page, tally: Optional[Dict[str, int]] = None) -> TranslatedPage:
        """
        Translate a whole page.

        Blank chunks are skipped. A chunk that still fails after retries
        fails the page.
        """
        logger.info(f"Translating page {page.index}")
        parts: List[str] = []
        chunks = [c for c in iter_chunks(page.source_text, self.chunk_size) if not c.is_blank]

        for position, chunk in enumerate(chunks, 1):
            logger.debug(f"Page {page.index} chunk {position}/{len(chunks)} ...")
            parts.append(await self.translate_chunk(chunk.text, tally))
            self._bump(tally, "chunks_translated")
            logger.debug(f"Page {page.index} chunk {position} done")

        self._bump(tally, "pages_translated")
        logger.info(f"Page {page.index} translated ({len(chunks)} chunks)")
        return TranslatedPage(index=page.index, text=PARAGRAPH_SEPARATOR.join(parts))
