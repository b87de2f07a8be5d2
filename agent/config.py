"""Configuration loading and validation."""

import json
import os
from dataclasses import dataclass, field
from agent.exceptions import ConfigError


DEFAULT_MODEL = "anthropic/claude-sonnet-4"


@dataclass
class ModelConfig:
    """Configuration for the chat model endpoint."""
    model_name: str = DEFAULT_MODEL
    base_url: str = ""
    api_key: str = ""


@dataclass
class TransportSettings:
    """Configuration for endpoint connectivity and retries."""
    connect_timeout: float = 10.0
    read_timeout: float = 300.0
    max_retries: int = 3


@dataclass
class AgentConfig:
    """Complete agent configuration."""
    chat_model: ModelConfig = field(default_factory=ModelConfig)
    transport: TransportSettings = field(default_factory=TransportSettings)
    max_iterations: int = 10
    interrupt_window: float = 2.0
    log_dir: str = "data/logs"


def load_config(config_path: str = "config.json") -> AgentConfig:
    """Load configuration from JSON file with defaults and environment overrides."""
    raw: dict = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}")
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

    # data_dir only locates the default log_dir
    data_dir = raw.get("data_dir", "data")
    if not isinstance(data_dir, str) or not data_dir.strip():
        raise ConfigError("data_dir must be a non-empty string")

    chat_model = _load_model_settings(raw.get("chat_model", {}))

    env_base_url = os.getenv("LLM_ENDPOINT")
    if env_base_url:
        chat_model.base_url = env_base_url
    env_api_key = os.getenv("LLM_KEY")
    if env_api_key:
        chat_model.api_key = env_api_key
    env_model = os.getenv("LLM_MODEL")
    if env_model:
        chat_model.model_name = env_model

    transport = _load_transport_settings(raw.get("transport", {}))

    max_iterations = _coerce_int(raw.get("max_iterations", 10), "max_iterations", 1)
    interrupt_window = _coerce_float(
        raw.get("interrupt_window", 2.0), "interrupt_window", 0.0
    )

    log_dir = raw.get("log_dir", os.path.join(data_dir, "logs"))
    if not isinstance(log_dir, str) or not log_dir.strip():
        raise ConfigError("log_dir must be a non-empty string")

    return AgentConfig(
        chat_model=chat_model,
        transport=transport,
        max_iterations=max_iterations,
        interrupt_window=interrupt_window,
        log_dir=log_dir,
    )


def resolve_model_name(cli_model: str | None, config: AgentConfig | None = None) -> str:
    """Pick the model name: CLI argument, then LLM_MODEL, then config, then default."""
    if cli_model:
        return cli_model
    env_model = os.getenv("LLM_MODEL")
    if env_model:
        return env_model
    if config is not None and config.chat_model.model_name:
        return config.chat_model.model_name
    return DEFAULT_MODEL


def require_endpoint(config: AgentConfig) -> None:
    """Raise ConfigError if no endpoint is configured."""
    if not config.chat_model.base_url.strip():
        raise ConfigError("LLM_ENDPOINT environment variable is required")


def _load_model_settings(raw: dict) -> ModelConfig:
    """Parse and validate chat model settings."""
    if not isinstance(raw, dict):
        raise ConfigError("chat_model must be an object")

    model_name = raw.get("model_name", DEFAULT_MODEL)
    if not isinstance(model_name, str) or not model_name.strip():
        raise ConfigError("chat_model.model_name must be a non-empty string")

    base_url = raw.get("base_url", "")
    if not isinstance(base_url, str):
        raise ConfigError("chat_model.base_url must be a string")

    api_key = raw.get("api_key", "")
    if not isinstance(api_key, str):
        raise ConfigError("chat_model.api_key must be a string")

    return ModelConfig(
        model_name=model_name.strip(),
        base_url=base_url.strip(),
        api_key=api_key.strip(),
    )


def _load_transport_settings(raw: dict) -> TransportSettings:
    """Parse and validate transport settings from config."""
    if not isinstance(raw, dict):
        raise ConfigError("transport must be an object")
    connect_timeout = _coerce_float(raw.get("connect_timeout", 10.0), "transport.connect_timeout", 0.1)
    read_timeout = _coerce_float(raw.get("read_timeout", 300.0), "transport.read_timeout", 0.1)
    max_retries = _coerce_int(raw.get("max_retries", 3), "transport.max_retries", 1)

    return TransportSettings(
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_retries=max_retries,
    )


def _coerce_float(value: object, name: str, min_value: float) -> float:
    """Coerce config value to float with basic validation."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number")

    if value < min_value:
        raise ConfigError(f"{name} must be >= {min_value}")
    return value


def _coerce_int(value: object, name: str, min_value: int) -> int:
    """Coerce config value to int with basic validation."""
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer")

    if value < min_value:
        raise ConfigError(f"{name} must be >= {min_value}")
    return value
