"""Unit tests for page translation."""

import pytest

from pagetran.core.exceptions import BackendError
from pagetran.core.models import Page
from pagetran.core.retry import RetryPolicy
from pagetran.translation.page_translator import PageTranslator
from pagetran.translation.prompts import build_translation_prompt, clean_translation_output, language_name

from tests.fixtures.backends import FakeTranslator, FlakyTranslator


@pytest.mark.asyncio
async def test_single_chunk_page(fake_translator):
    translator = PageTranslator(fake_translator, chunk_size=4000)

    result = await translator.translate_page(Page(index=3, source_text="Hello world"))

    assert result.index == 3
    assert result.text == "T:Hello world"
    assert len(fake_translator.requests) == 1


@pytest.mark.asyncio
async def test_chunks_sent_in_order_and_joined(fake_translator):
    """Chunks go out one by one, in reading order, and are joined by blank lines."""
    translator = PageTranslator(fake_translator, chunk_size=12)

    result = await translator.translate_page(Page(index=1, source_text="alpha beta gamma delta epsilon"))

    sent = [r.text for r in fake_translator.requests]
    assert len(sent) > 1
    assert "".join(sent) == "alpha beta gamma delta epsilon"
    assert result.text == "\n\n".join(f"T:{s}".strip() for s in sent)
    assert translator.stats["chunks_translated"] == len(sent)


@pytest.mark.asyncio
async def test_blank_page_makes_no_calls(fake_translator):
    translator = PageTranslator(fake_translator)

    result = await translator.translate_page(Page(index=2, source_text="   "))

    assert result.text == ""
    assert fake_translator.requests == []
    assert translator.stats["pages_translated"] == 1


@pytest.mark.asyncio
async def test_request_carries_prompt_and_languages(fake_translator):
    translator = PageTranslator(fake_translator, source_lang="en", target_lang="th")

    await translator.translate_page(Page(index=1, source_text="Good morning"))

    request = fake_translator.requests[0]
    assert request.source_lang == "en"
    assert request.target_lang == "th"
    assert "Thai" in request.system_prompt
    assert "Good morning" in request.user_prompt


@pytest.mark.asyncio
async def test_transient_failures_are_retried(no_sleep):
    backend = FlakyTranslator(failures=2, status_code=429)
    translator = PageTranslator(backend, retry_policy=RetryPolicy(retries=4), sleep=no_sleep)

    result = await translator.translate_page(Page(index=1, source_text="Retry me"))

    assert result.text == "T:Retry me"
    assert backend.calls == 3
    assert translator.stats["retries"] == 2
    assert len(no_sleep.delays) == 2


@pytest.mark.asyncio
async def test_tally_counts_only_its_own_calls(no_sleep):
    backend = FlakyTranslator(failures=1, status_code=503)
    translator = PageTranslator(backend, chunk_size=12, sleep=no_sleep)
    await translator.translate_page(Page(index=1, source_text="Warm up"))
    calls_before = len(backend.requests)
    tally = {}

    await translator.translate_page(Page(index=2, source_text="alpha beta gamma delta"), tally)

    chunks = len(backend.requests) - calls_before
    assert chunks > 1
    assert tally["chunks_translated"] == chunks
    assert tally["pages_translated"] == 1
    assert "retries" not in tally
    assert translator.stats["chunks_translated"] == chunks + 1
    assert translator.stats["retries"] == 1


@pytest.mark.asyncio
async def test_permanent_failure_fails_page(no_sleep):
    backend = FlakyTranslator(failures=1, status_code=401)
    translator = PageTranslator(backend, sleep=no_sleep)

    with pytest.raises(BackendError) as exc_info:
        await translator.translate_page(Page(index=1, source_text="Nope"))

    assert exc_info.value.status_code == 401
    assert backend.calls == 1
    assert no_sleep.delays == []


@pytest.mark.asyncio
async def test_output_is_cleaned():
    translator = PageTranslator(FakeTranslator(prefix="Translation: "))

    result = await translator.translate_page(Page(index=1, source_text="Bonjour"))

    assert result.text == "Bonjour"


class TestPrompts:
    """Prompt building and output clean-up."""

    def test_language_names(self):
        assert language_name("th") == "Thai"
        assert language_name("en-US") == "English"
        assert language_name("xx") == "xx"

    def test_prompt_contains_text_and_languages(self):
        system, user = build_translation_prompt("Some text", "en", "fr")
        assert "English" in system and "French" in system
        assert "Some text" in user

    def test_clean_strips_think_block(self):
        assert clean_translation_output("<think>hmm</think>Salut") == "Salut"

    def test_clean_strips_code_fence(self):
        assert clean_translation_output("```text\nSalut\n```") == "Salut"

    def test_clean_keeps_plain_text(self):
        assert clean_translation_output("  Salut le monde ") == "Salut le monde"

    def test_clean_never_empties(self):
        assert clean_translation_output("Translation:") == "Translation:"
