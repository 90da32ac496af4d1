"""Google Gemini translation backend."""

import os
import time
from typing import Optional

try:
    from google import genai
    from google.genai import errors as genai_errors
    from google.genai import types as genai_types
    HAS_GENAI = True
except ImportError:
    HAS_GENAI = False

from ..base import TranslationBackend, TranslationRequest, TranslationResponse
from ...core.exceptions import BackendError


class GeminiBackend(TranslationBackend):
    """Gemini text-generation backend (google-genai SDK)."""

    name = "gemini"

    def __init__(self, api_key: Optional[str] = None, model: str = "gemini-1.5-flash"):
        if not HAS_GENAI:
            raise ImportError("google-genai package not installed. Run: pip install google-genai")

        api_key = api_key or os.getenv("GEMINI_API_KEY")
        super().__init__(api_key, model)

        self.client = genai.Client(api_key=self.api_key) if self.api_key else None

    def _config(self, request: TranslationRequest):
        return genai_types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            temperature=request.temperature
        )

    def _error(self, e: Exception) -> BackendError:
        status = e.code if isinstance(e, genai_errors.APIError) else None
        return BackendError(self.name, str(e), status_code=status, original_error=e)

    def _response(self, text: Optional[str], start_time: float, usage) -> TranslationResponse:
        tokens_used = getattr(usage, "total_token_count", 0) or 0
        return TranslationResponse(
            translations=[(text or "").strip()],
            backend=self.name,
            model=self.model,
            tokens_used=tokens_used,
            latency=time.time() - start_time
        )

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """Translate asynchronously."""
        if not self.client:
            raise BackendError(self.name, "GEMINI_API_KEY not configured")

        start_time = time.time()
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self.prompt_for(request),
                config=self._config(request)
            )
        except genai_errors.APIError as e:
            raise self._error(e) from e

        return self._response(response.text, start_time, response.usage_metadata)

    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        """Translate synchronously."""
        if not self.client:
            raise BackendError(self.name, "GEMINI_API_KEY not configured")

        start_time = time.time()
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=self.prompt_for(request),
                config=self._config(request)
            )
        except genai_errors.APIError as e:
            raise self._error(e) from e

        return self._response(response.text, start_time, response.usage_metadata)
