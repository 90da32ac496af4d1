"""Unit tests for the backend registry and SDK error mapping."""

import inspect
from types import SimpleNamespace

import httpx
import pytest

from pagetran.core.exceptions import BackendError, ConfigurationError
from pagetran.core.models import Page
from pagetran.core.retry import RetryPolicy
from pagetran.translation.backends import BACKENDS, create_backend, get_backend_class
from pagetran.translation.backends.local_backend import LocalBackend
from pagetran.translation.base import TranslationRequest
from pagetran.translation.page_translator import PageTranslator


def make_request(text="Hello"):
    return TranslationRequest(text=text, source_lang="en", target_lang="fr")


def test_registry_names():
    assert set(BACKENDS) == {"gemini", "openai", "anthropic", "ollama", "local"}


def test_unknown_backend():
    with pytest.raises(ConfigurationError) as exc_info:
        get_backend_class("babelfish")

    assert exc_info.value.config_key == "backend"
    assert "local" in exc_info.value.valid_values


def test_create_local_backend():
    backend = create_backend("LOCAL")

    assert isinstance(backend, LocalBackend)
    assert backend.is_available()
    assert backend.get_info()["name"] == "local"


@pytest.mark.asyncio
async def test_local_backend_echoes():
    response = await LocalBackend().translate(make_request("Bonjour"))

    assert response.text == "Bonjour"
    assert response.backend == "local"


class TestOpenAIErrors:
    """OpenAI SDK failures become BackendError with the HTTP status."""

    def _backend_raising(self, error):
        openai = pytest.importorskip("openai")
        from pagetran.translation.backends.openai_backend import OpenAIBackend

        backend = OpenAIBackend(api_key="test-key")

        async def create(**kwargs):
            raise error

        backend.async_client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
        return backend

    @pytest.mark.asyncio
    async def test_rate_limit_is_transient(self):
        openai = pytest.importorskip("openai")
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        error = openai.RateLimitError("slow down", response=httpx.Response(429, request=request), body=None)
        backend = self._backend_raising(error)

        with pytest.raises(BackendError) as exc_info:
            await backend.translate(make_request())

        assert exc_info.value.status_code == 429
        assert exc_info.value.transient
        assert exc_info.value.original_error is error

    @pytest.mark.asyncio
    async def test_connection_error_has_no_status(self):
        openai = pytest.importorskip("openai")
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        backend = self._backend_raising(openai.APIConnectionError(request=request))

        with pytest.raises(BackendError) as exc_info:
            await backend.translate(make_request())

        assert exc_info.value.status_code is None
        assert not exc_info.value.transient

    @pytest.mark.asyncio
    async def test_missing_key(self, monkeypatch):
        pytest.importorskip("openai")
        from pagetran.translation.backends.openai_backend import OpenAIBackend
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        backend = OpenAIBackend()

        assert not backend.is_available()
        with pytest.raises(BackendError, match="not configured"):
            await backend.translate(make_request())


def unavailable_transport(calls):
    """httpx transport answering every request with 503 and recording it."""

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(503, json={"error": {"type": "overloaded_error", "message": "overloaded"}})

    return httpx.MockTransport(handler)


async def translate_through_retries(backend, no_sleep, retries=2):
    translator = PageTranslator(
        backend, target_lang="fr", retry_policy=RetryPolicy(retries=retries), sleep=no_sleep
    )
    with pytest.raises(BackendError) as exc_info:
        await translator.translate_page(Page(index=1, source_text="Hello"))
    return translator, exc_info.value


class TestRetryBudget:
    """Only RetryPolicy retries: the SDK clients send each request once."""

    @pytest.mark.asyncio
    async def test_openai_one_request_per_attempt(self, no_sleep):
        pytest.importorskip("openai")
        from pagetran.translation.backends.openai_backend import OpenAIBackend
        calls = []
        backend = OpenAIBackend(api_key="test-key")
        assert backend.client.max_retries == 0
        backend.async_client = backend.async_client.with_options(
            http_client=httpx.AsyncClient(transport=unavailable_transport(calls))
        )

        translator, error = await translate_through_retries(backend, no_sleep)

        assert error.status_code == 503
        assert len(calls) == 3
        assert translator.stats["retries"] == 2

    @pytest.mark.asyncio
    async def test_anthropic_one_request_per_attempt(self, no_sleep, monkeypatch):
        pytest.importorskip("anthropic")
        from pagetran.translation.backends.anthropic_backend import AnthropicBackend
        monkeypatch.delenv("ANTHROPIC_API_BASE_URL", raising=False)
        calls = []
        backend = AnthropicBackend(api_key="test-key")
        assert backend.client.max_retries == 0
        backend.async_client = backend.async_client.with_options(
            http_client=httpx.AsyncClient(transport=unavailable_transport(calls))
        )

        translator, error = await translate_through_retries(backend, no_sleep)

        assert error.status_code == 503
        assert len(calls) == 3
        assert translator.stats["retries"] == 2


class TestAnthropicErrors:
    """Anthropic SDK failures and request shape."""

    def _backend(self, monkeypatch):
        pytest.importorskip("anthropic")
        from pagetran.translation.backends.anthropic_backend import AnthropicBackend
        monkeypatch.delenv("ANTHROPIC_API_BASE_URL", raising=False)
        return AnthropicBackend(api_key="test-key")

    @pytest.mark.asyncio
    async def test_rate_limit_is_transient(self, monkeypatch):
        anthropic = pytest.importorskip("anthropic")
        backend = self._backend(monkeypatch)
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.RateLimitError("slow down", response=httpx.Response(429, request=request), body=None)

        async def create(**kwargs):
            raise error

        backend.async_client = SimpleNamespace(messages=SimpleNamespace(create=create))

        with pytest.raises(BackendError) as exc_info:
            await backend.translate(make_request())

        assert exc_info.value.backend == "anthropic"
        assert exc_info.value.status_code == 429
        assert exc_info.value.transient
        assert exc_info.value.original_error is error

    def test_request_fields_accepted_by_installed_sdk(self, monkeypatch):
        anthropic = pytest.importorskip("anthropic")
        backend = self._backend(monkeypatch)
        request = TranslationRequest(
            text="Hello", source_lang="en", target_lang="fr", system_prompt="You translate."
        )

        kwargs = backend._kwargs(request)

        accepted = inspect.signature(anthropic.resources.AsyncMessages.create).parameters
        assert set(kwargs) <= set(accepted)
        assert kwargs["system"] == "You translate."


class TestGeminiErrors:
    """google-genai APIError codes carry over to BackendError."""

    def _backend_raising(self, error):
        pytest.importorskip("google.genai")
        from pagetran.translation.backends.gemini_backend import GeminiBackend

        backend = GeminiBackend(api_key="test-key")

        async def generate_content(**kwargs):
            raise error

        backend.client = SimpleNamespace(aio=SimpleNamespace(models=SimpleNamespace(generate_content=generate_content)))
        return backend

    @pytest.mark.asyncio
    async def test_server_error_is_transient(self):
        errors = pytest.importorskip("google.genai.errors")
        error = errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})
        backend = self._backend_raising(error)

        with pytest.raises(BackendError) as exc_info:
            await backend.translate(make_request())

        assert exc_info.value.backend == "gemini"
        assert exc_info.value.status_code == 503
        assert exc_info.value.transient
        assert exc_info.value.original_error is error

    @pytest.mark.asyncio
    async def test_bad_request_is_permanent(self):
        errors = pytest.importorskip("google.genai.errors")
        error = errors.ClientError(400, {"error": {"code": 400, "message": "bad", "status": "INVALID_ARGUMENT"}})
        backend = self._backend_raising(error)

        with pytest.raises(BackendError) as exc_info:
            await backend.translate(make_request())

        assert exc_info.value.status_code == 400
        assert not exc_info.value.transient

    @pytest.mark.asyncio
    async def test_missing_key(self, monkeypatch):
        pytest.importorskip("google.genai")
        from pagetran.translation.backends.gemini_backend import GeminiBackend
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        with pytest.raises(BackendError, match="not configured"):
            await GeminiBackend().translate(make_request())
