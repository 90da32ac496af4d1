"""Fake translation backends for tests."""

import asyncio

from pagetran.core.exceptions import BackendError
from pagetran.translation.base import TranslationBackend, TranslationRequest, TranslationResponse


class FakeTranslator(TranslationBackend):
    """Fake translator that always succeeds with predictable output."""

    name = "fake"

    def __init__(self, prefix: str = "T:", delay: float = 0.0):
        super().__init__(api_key="fake", model="fake")
        self.prefix = prefix
        self.delay = delay
        self.requests = []

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.translate_sync(request)

    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        return TranslationResponse(
            translations=[f"{self.prefix}{request.text}"],
            backend=self.name,
            model=self.model,
            tokens_used=1
        )


class FlakyTranslator(FakeTranslator):
    """Fails with the given status ``failures`` times, then succeeds."""

    def __init__(self, failures: int, status_code: int = 503, **kwargs):
        super().__init__(**kwargs)
        self.failures = failures
        self.status_code = status_code
        self.calls = 0

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        self.calls += 1
        if self.calls <= self.failures:
            raise BackendError(self.name, "simulated failure", status_code=self.status_code)
        return await super().translate(request)


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float):
        self.delays.append(delay)
