"""Translation backend implementations."""

import importlib
from typing import Dict, Optional, Tuple

from ..base import TranslationBackend
from ...core.exceptions import ConfigurationError

# name -> (module, class, API key env var)
BACKENDS: Dict[str, Tuple[str, str, Optional[str]]] = {
    "gemini": (".gemini_backend", "GeminiBackend", "GEMINI_API_KEY"),
    "openai": (".openai_backend", "OpenAIBackend", "OPENAI_API_KEY"),
    "anthropic": (".anthropic_backend", "AnthropicBackend", "ANTHROPIC_API_KEY"),
    "ollama": (".ollama_backend", "OllamaBackend", None),
    "local": (".local_backend", "LocalBackend", None),
}


def get_backend_class(name: str):
    """Import and return the backend class registered under ``name``."""
    key = name.lower()
    if key not in BACKENDS:
        raise ConfigurationError(
            f"Unknown backend: {name}",
            config_key="backend",
            invalid_value=name,
            valid_values=sorted(BACKENDS)
        )
    module_name, class_name, _ = BACKENDS[key]
    module = importlib.import_module(module_name, __name__)
    return getattr(module, class_name)


def create_backend(name: str, api_key: Optional[str] = None, model: Optional[str] = None) -> TranslationBackend:
    """
    Create a translation backend by name.

    Args:
        name: Registered backend name (gemini, openai, anthropic, ollama, local)
        api_key: API key; backends fall back to their environment variable
        model: Model name; each backend has its own default
    """
    backend_class = get_backend_class(name)
    kwargs = {"api_key": api_key}
    if model:
        kwargs["model"] = model
    return backend_class(**kwargs)


__all__ = [
    'BACKENDS',
    'get_backend_class',
    'create_backend',
]
