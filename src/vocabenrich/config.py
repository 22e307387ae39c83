"""
Run configuration for vocab-enrich.

Settings are read from a YAML file (vocabenrich.yaml by default, or the
path in $VOCABENRICH_CONFIG). Any key left out keeps its built-in
default, and a missing file means all defaults:

    endpoint: https://dict.youdao.com/jsonapi
    timeout: 15
    concurrency: 5
    poll_interval: 0.2
    batch_size: 50
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "VOCABENRICH_CONFIG"
DEFAULT_CONFIG_FILE = Path("vocabenrich.yaml")

DEFAULT_ENDPOINT = "https://dict.youdao.com/jsonapi"
USER_AGENT = "VocabEnrich/0.1 (vocabulary list enrichment)"


@dataclass(frozen=True)
class EnrichConfig:
    """Settings for one enrichment run."""
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 15.0
    user_agent: str = USER_AGENT
    # Lookups in flight at once (one window)
    concurrency: int = 5
    # Seconds between checks while paused
    poll_interval: float = 0.2
    max_log_events: int = 200
    batch_size: int = 50

    def validate(self) -> "EnrichConfig":
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        return self


def resolve_config_path(path: Optional[Path] = None) -> Path:
    """Pick the config file: explicit path, then $VOCABENRICH_CONFIG, then ./vocabenrich.yaml."""
    if path is not None:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_FILE


def check_type(key: str, value: Any, expected: type) -> Any:
    """Return value as the field's type, or raise ValueError."""
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        raise ValueError(f"{key} must be {expected.__name__}, got {value!r}")
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise ValueError(f"{key} must be {expected.__name__}, got {value!r}")
    return value


def config_from_dict(data: Dict[str, Any]) -> EnrichConfig:
    """Build a config from a mapping, ignoring unknown keys."""
    known = {f.name: f.type for f in fields(EnrichConfig)}
    values = {}
    for key, value in data.items():
        if key in known:
            values[key] = check_type(key, value, known[key])
        else:
            logger.warning(f"Ignoring unknown config key: {key}")
    return EnrichConfig(**values).validate()


def load_config(path: Optional[Path] = None, **overrides) -> EnrichConfig:
    """
    Load run configuration.

    Args:
        path: Config file to read (see resolve_config_path)
        **overrides: Values taking precedence over the file (None is skipped)

    Returns:
        Validated EnrichConfig
    """
    config_path = resolve_config_path(path)
    data: Dict[str, Any] = {}

    if config_path.exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")
        logger.debug(f"Loaded config from {config_path}")

    config = config_from_dict(data)

    field_types = {f.name: f.type for f in fields(EnrichConfig)}
    overrides = {
        k: check_type(k, v, field_types[k]) for k, v in overrides.items() if v is not None
    }
    if overrides:
        config = replace(config, **overrides).validate()

    return config
