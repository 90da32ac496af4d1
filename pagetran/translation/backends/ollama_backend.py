"""Ollama local translation backend."""

import os
import time
from typing import Optional

import httpx

try:
    import ollama
    HAS_OLLAMA = True
except ImportError:
    HAS_OLLAMA = False

from ..base import TranslationBackend, TranslationRequest, TranslationResponse
from ...core.exceptions import BackendError


class OllamaBackend(TranslationBackend):
    """Ollama local LLM translation backend."""

    name = "ollama"

    def __init__(self, api_key: Optional[str] = None, model: str = "llama3.1", host: Optional[str] = None):
        if not HAS_OLLAMA:
            raise ImportError("ollama package not installed. Run: pip install ollama")

        super().__init__(api_key, model)
        host = host or os.getenv("OLLAMA_HOST")
        self.client = ollama.Client(host=host)
        self.async_client = ollama.AsyncClient(host=host)

    def _kwargs(self, request: TranslationRequest):
        return {
            "model": self.model,
            "prompt": self.prompt_for(request),
            "system": request.system_prompt or "",
            "options": {"temperature": request.temperature, "num_predict": 4096}
        }

    def _error(self, e: Exception) -> BackendError:
        return BackendError(
            self.name,
            f"{e}. Make sure Ollama is running and model '{self.model}' is installed.",
            status_code=getattr(e, "status_code", None),
            original_error=e
        )

    def _response(self, response, start_time: float) -> TranslationResponse:
        return TranslationResponse(
            translations=[response["response"].strip()],
            backend=self.name,
            model=self.model,
            tokens_used=(response.get("prompt_eval_count") or 0) + (response.get("eval_count") or 0),
            latency=time.time() - start_time
        )

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """Translate asynchronously."""
        start_time = time.time()
        try:
            response = await self.async_client.generate(**self._kwargs(request))
        except (ollama.ResponseError, ConnectionError) as e:
            raise self._error(e) from e
        return self._response(response, start_time)

    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        """Translate synchronously."""
        start_time = time.time()
        try:
            response = self.client.generate(**self._kwargs(request))
        except (ollama.ResponseError, ConnectionError) as e:
            raise self._error(e) from e
        return self._response(response, start_time)

    def is_available(self) -> bool:
        """Check if the Ollama server answers."""
        try:
            self.client.list()
            return True
        except (ollama.ResponseError, ConnectionError, httpx.HTTPError):
            return False
