"""OpenAI translation backend."""

import os
import time
from typing import Optional

try:
    import openai
    from openai import OpenAI, AsyncOpenAI
    HAS_OPENAI = True
except ImportError:
    HAS_OPENAI = False

from ..base import TranslationBackend, TranslationRequest, TranslationResponse
from ...core.exceptions import BackendError


class OpenAIBackend(TranslationBackend):
    """OpenAI GPT-based translation backend."""

    name = "openai"

    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o-mini"):
        if not HAS_OPENAI:
            raise ImportError("openai package not installed. Run: pip install openai")

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        super().__init__(api_key, model)

        if self.api_key:
            self.client = OpenAI(api_key=self.api_key, max_retries=0)
            self.async_client = AsyncOpenAI(api_key=self.api_key, max_retries=0)
        else:
            self.client = None
            self.async_client = None

    def _build_messages(self, request: TranslationRequest):
        """Build messages for OpenAI API."""
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": self.prompt_for(request)})
        return messages

    def _error(self, e: Exception) -> BackendError:
        status = e.status_code if isinstance(e, openai.APIStatusError) else None
        return BackendError(self.name, str(e), status_code=status, original_error=e)

    def _response(self, response, start_time: float) -> TranslationResponse:
        return TranslationResponse(
            translations=[(response.choices[0].message.content or "").strip()],
            backend=self.name,
            model=self.model,
            tokens_used=response.usage.total_tokens if response.usage else 0,
            latency=time.time() - start_time,
            metadata={"finish_reason": response.choices[0].finish_reason}
        )

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """Translate asynchronously."""
        if not self.async_client:
            raise BackendError(self.name, "OPENAI_API_KEY not configured")

        start_time = time.time()
        try:
            response = await self.async_client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(request),
                temperature=request.temperature,
                max_tokens=4096
            )
        except openai.OpenAIError as e:
            raise self._error(e) from e

        return self._response(response, start_time)

    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        """Translate synchronously."""
        if not self.client:
            raise BackendError(self.name, "OPENAI_API_KEY not configured")

        start_time = time.time()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=self._build_messages(request),
                temperature=request.temperature,
                max_tokens=4096
            )
        except openai.OpenAIError as e:
            raise self._error(e) from e

        return self._response(response, start_time)
