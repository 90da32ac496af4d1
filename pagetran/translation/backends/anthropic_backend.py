"""Anthropic Claude translation backend."""

import os
import time
import logging
from typing import Optional

try:
    import anthropic
    from anthropic import Anthropic, AsyncAnthropic
    HAS_ANTHROPIC = True
except ImportError:
    HAS_ANTHROPIC = False

from ..base import TranslationBackend, TranslationRequest, TranslationResponse
from ...core.exceptions import BackendError

logger = logging.getLogger(__name__)


class AnthropicBackend(TranslationBackend):
    """Anthropic Claude-based translation backend."""

    name = "anthropic"

    def __init__(self, api_key: Optional[str] = None, model: str = "claude-3-5-haiku-latest", base_url: Optional[str] = None):
        if not HAS_ANTHROPIC:
            raise ImportError("anthropic package not installed. Run: pip install anthropic")

        api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        base_url = base_url or os.getenv("ANTHROPIC_API_BASE_URL")
        super().__init__(api_key, model)

        if self.api_key:
            client_kwargs = {"api_key": self.api_key, "max_retries": 0}
            if base_url:
                # The SDK appends /v1 itself
                client_kwargs["base_url"] = base_url.rstrip("/").removesuffix("/v1")
                logger.info(f"Using custom Anthropic API endpoint: {client_kwargs['base_url']}")

            self.client = Anthropic(**client_kwargs)
            self.async_client = AsyncAnthropic(**client_kwargs)
        else:
            self.client = None
            self.async_client = None

    def _error(self, e: Exception) -> BackendError:
        status = e.status_code if isinstance(e, anthropic.APIStatusError) else None
        return BackendError(self.name, str(e), status_code=status, original_error=e)

    def _response(self, response, start_time: float) -> TranslationResponse:
        text = "".join(part.text for part in response.content if getattr(part, "type", "") == "text")
        return TranslationResponse(
            translations=[text.strip()],
            backend=self.name,
            model=self.model,
            tokens_used=response.usage.input_tokens + response.usage.output_tokens,
            latency=time.time() - start_time,
            metadata={"stop_reason": response.stop_reason}
        )

    def _kwargs(self, request: TranslationRequest):
        kwargs = {
            "model": self.model,
            "max_tokens": 4096,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": self.prompt_for(request)}]
        }
        if request.system_prompt:
            kwargs["system"] = request.system_prompt
        return kwargs

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """Translate asynchronously."""
        if not self.async_client:
            raise BackendError(self.name, "ANTHROPIC_API_KEY not configured")

        start_time = time.time()
        try:
            response = await self.async_client.messages.create(**self._kwargs(request))
        except anthropic.AnthropicError as e:
            raise self._error(e) from e

        return self._response(response, start_time)

    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        """Translate synchronously."""
        if not self.client:
            raise BackendError(self.name, "ANTHROPIC_API_KEY not configured")

        start_time = time.time()
        try:
            response = self.client.messages.create(**self._kwargs(request))
        except anthropic.AnthropicError as e:
            raise self._error(e) from e

        return self._response(response, start_time)
