"""Configuration loading and management."""

import os
import dataclasses
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from pagetran.core.exceptions import ConfigurationError
from pagetran.core.pipeline import PipelineConfig

# env var -> PipelineConfig field
ENV_OVERRIDES = {
    "PAGETRAN_BACKEND": "backend",
    "PAGETRAN_MODEL": "model_name",
    "PAGETRAN_SOURCE_LANG": "source_lang",
    "PAGETRAN_TARGET_LANG": "target_lang",
    "PAGETRAN_FONT_PATH": "font_path",
    "PAGETRAN_UPLOAD_DIR": "upload_dir",
    "PAGETRAN_LOG_LEVEL": "log_level",
}

API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

PATH_FIELDS = {"font_path", "font_cache_dir", "upload_dir"}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file, then apply environment overrides.

    Args:
        config_path: Path to config file (defaults to configs/default.yaml if present)

    Returns:
        Configuration dictionary with PipelineConfig field names
    """
    if config_path is None:
        default = Path("configs/default.yaml")
        config = _read_yaml(default) if default.exists() else {}
    else:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        config = _read_yaml(path)

    return override_with_env(config)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")
    return config


def save_config(config: Dict[str, Any], config_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Output path
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def override_with_env(config: Dict[str, Any]) -> Dict[str, Any]:
    """Override config values with environment variables."""
    config = dict(config)
    for env_var, key in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            config[key] = value

    if not config.get("api_key"):
        env_var = API_KEY_ENV.get(str(config.get("backend", "gemini")).lower())
        if env_var and os.getenv(env_var):
            config["api_key"] = os.getenv(env_var)

    return config


def config_from_dict(data: Dict[str, Any]) -> PipelineConfig:
    """
    Build a PipelineConfig, rejecting unknown keys.

    Raises:
        ConfigurationError: on unknown keys
    """
    known = {f.name: f for f in dataclasses.fields(PipelineConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            config_key=unknown[0],
            valid_values=sorted(known)
        )

    kwargs = {}
    for key, value in data.items():
        if value is not None and key in PATH_FIELDS:
            value = Path(value)
        kwargs[key] = value

    return PipelineConfig(**kwargs)
