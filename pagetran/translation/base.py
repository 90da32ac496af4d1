"""
Base translation backend interface.
All translation engines must inherit from TranslationBackend.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Dict, Optional
from dataclasses import dataclass


@dataclass
class TranslationRequest:
    """Request for translation of one chunk."""
    text: str
    source_lang: str
    target_lang: str
    system_prompt: Optional[str] = None
    user_prompt: Optional[str] = None
    temperature: float = 0.0


@dataclass
class TranslationResponse:
    """Response from translation backend."""
    translations: List[str]
    backend: str
    model: str
    tokens_used: int = 0
    latency: float = 0.0
    metadata: Dict = None

    @property
    def text(self) -> str:
        return self.translations[0] if self.translations else ""


class TranslationBackend(ABC):
    """
    Abstract base class for translation backends.

    Failures must be raised as ``BackendError`` with the remote status code
    so the retry layer can tell rate limiting and 5xx apart from permanent
    errors.
    """

    name = "base"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key
        self.model = model

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        """
        Translate text asynchronously.

        The default runs ``translate_sync`` in the loop's executor so a
        blocking SDK does not stall other pages.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.translate_sync, request)

    @abstractmethod
    def translate_sync(self, request: TranslationRequest) -> TranslationResponse:
        """
        Translate text synchronously.

        Args:
            request: Translation request with text and prompts

        Returns:
            TranslationResponse with translations and metadata
        """
        pass

    def prompt_for(self, request: TranslationRequest) -> str:
        """User prompt to send, falling back to the raw text."""
        return request.user_prompt or request.text

    def is_available(self) -> bool:
        """Check if backend is available and configured."""
        return self.api_key is not None

    def get_info(self) -> Dict:
        """Get backend information."""
        return {
            "name": self.name,
            "model": self.model,
            "available": self.is_available()
        }
