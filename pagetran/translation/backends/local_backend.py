"""Local echo backend: returns the source text unchanged, for offline runs and tests."""

import time
from typing import Optional

from ..base import TranslationBackend, TranslationRequest, TranslationResponse


class LocalBackend(TranslationBackend):
    """Deterministic identity translator (no network)."""

    name = "local"

    def __init__(self, api_key: Optional[str] = None, model: str = "local-echo"):
        super().__init__(api_key, model)

    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        start = time.time()
        return TranslationResponse(
            translations=[request.text or ""],
            backend=self.name,
            model=self.model,
            latency=time.time() - start,
            metadata={"info": "Local echo translation (no network)"},
        )

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        return self.translate_sync(request)

    def is_available(self) -> bool:
        return True
