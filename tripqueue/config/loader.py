# tripqueue/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management.
Secrets can be supplied through the environment instead of the YAML file.
"""

import logging
import os
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import TripQueueConfig

logger = logging.getLogger(__name__)

APP_NAME = "tripqueue"

# env var -> (section, field)
ENV_OVERRIDES = {
    "TRIPQUEUE_LLM_API_KEY": ("openai", "api_key"),
    "TRIPQUEUE_FIRESTORE_TOKEN": ("firestore", "access_token"),
    "TRIPQUEUE_FIRESTORE_PROJECT": ("firestore", "project_id"),
}


def get_config_dir() -> Path:
    """Get the user config directory, creating it if needed."""
    return user_config_path(APP_NAME, ensure_exists=True)


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    return get_config_dir() / "config.yaml"


def apply_env_overrides(config: TripQueueConfig) -> TripQueueConfig:
    """Return a copy of config with environment secrets applied."""
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        sub = getattr(config, section).model_copy(update={field: value})
        config = config.model_copy(update={section: sub})
        logger.info(f"Applied {env_name} to {section}.{field}")
    return config


def load_config(path: Path | None = None) -> TripQueueConfig:
    """
    Load configuration from YAML file.

    If config file doesn't exist, creates it with defaults.
    Returns validated Pydantic model with environment overrides applied.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        default_config = TripQueueConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Created default config at {config_path}")
        return apply_env_overrides(default_config)

    with config_path.open("r") as f:
        config_data = yaml.safe_load(f) or {}

    config = TripQueueConfig(**config_data)
    logger.info(f"Loaded config from {config_path}")
    return apply_env_overrides(config)
