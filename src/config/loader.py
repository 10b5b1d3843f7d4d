"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers win):

  1. ``config/config.yaml`` -- prompt text and the default guideline seed set
  2. ``.env`` file / environment variables -- via :class:`Settings`

The YAML carries content that is awkward in environment variables
(multi-line system prompt, the list of seed guidelines); ``Settings``
carries credentials and tunables.
"""

from pathlib import Path

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant that gives brand-consistent answers based on "
    "the following brand variables and guidelines:\n\n{context}\n\n"
    "Please provide responses that align with these brand guidelines and maintain "
    "consistency with the brand's voice, tone, and messaging strategy."
)


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance to merge; a fresh one is built if omitted.

    Returns:
        Fully resolved configuration dictionary.  ``chat.system_prompt`` and
        ``seed.guidelines`` are always present.

    Raises:
        ConfigurationError: If the system prompt has no ``{context}``
            placeholder or ``seed.guidelines`` is not a list.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    defaults = {
        "chat": {"system_prompt": DEFAULT_SYSTEM_PROMPT},
        "seed": {"guidelines": []},
    }
    _deep_merge(defaults, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "chat": {
            "top_k": settings.rag_top_k,
            "temperature": settings.chat_temperature,
            "max_tokens": settings.chat_max_tokens,
        },
    }

    _deep_merge(defaults, env_overrides)
    _validate(defaults, config_path)
    return defaults


def _validate(config: dict, config_path: Path) -> None:
    """Reject a prompt without a ``{context}`` slot or a non-list seed set."""
    prompt = config["chat"].get("system_prompt")
    if not isinstance(prompt, str) or "{context}" not in prompt:
        raise ConfigurationError(
            message=f"chat.system_prompt in {config_path} must contain a {{context}} placeholder"
        )
    guidelines = config["seed"].get("guidelines")
    if guidelines is None:
        config["seed"]["guidelines"] = []
    elif not isinstance(guidelines, list):
        raise ConfigurationError(message=f"seed.guidelines in {config_path} must be a list")


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
