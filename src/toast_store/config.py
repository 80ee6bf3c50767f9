from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Maximum number of toasts kept in the store at once.
CAPACITY = 5
# Delay between a dismissal and the hard removal of the toast (milliseconds).
REMOVE_DELAY_MS = 1000

ENV_CAPACITY = "TOAST_CAPACITY"
ENV_REMOVE_DELAY_MS = "TOAST_REMOVE_DELAY_MS"


@dataclass(frozen=True)
class ToastConfig:
    """Architectural parameters of a toast store.

    Attributes:
        capacity: Maximum toasts retained; the oldest are dropped on overflow.
        remove_delay_ms: Time between ``open`` turning False and removal.
    """

    capacity: int = CAPACITY
    remove_delay_ms: float = REMOVE_DELAY_MS

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity <= 0:
            raise ConfigError(f"capacity must be a positive integer, got {self.capacity!r}")
        if isinstance(self.remove_delay_ms, bool) or not isinstance(self.remove_delay_ms, (int, float)):
            raise ConfigError(f"remove_delay_ms must be a number, got {self.remove_delay_ms!r}")
        if not math.isfinite(self.remove_delay_ms):
            raise ConfigError(f"remove_delay_ms must be finite, got {self.remove_delay_ms!r}")
        if self.remove_delay_ms < 0:
            raise ConfigError(f"remove_delay_ms must not be negative, got {self.remove_delay_ms!r}")

    @property
    def remove_delay_seconds(self) -> float:
        return self.remove_delay_ms / 1000.0

    def as_dict(self) -> Dict[str, Any]:
        return {"capacity": self.capacity, "remove_delay_ms": self.remove_delay_ms}


@lru_cache(maxsize=1)
def _load_schema() -> Dict[str, Any]:
    text = resource_files("toast_store.data").joinpath("config.schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def validate_config_dict(data: Mapping[str, Any]) -> None:
    """Validate a raw configuration mapping against the packaged JSON schema.

    Raises:
        jsonschema.ValidationError if the data is invalid.
    """
    validator = Draft202012Validator(_load_schema())
    errors = sorted(validator.iter_errors(dict(data)), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Toast config validation error at %s: %s", list(err.path), err.message)
        raise errors[0]


def _read_yaml(text: str, origin: str) -> Dict[str, Any]:
    raw = yaml.safe_load(text) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Toast config in {origin} must be a mapping, got {type(raw).__name__}")
    return raw


def config_from_env(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect overrides from ``TOAST_*`` environment variables.

    Unparseable values are logged and skipped.
    """
    env = os.environ if env is None else env
    mapping = {
        ENV_CAPACITY: ("capacity", int),
        ENV_REMOVE_DELAY_MS: ("remove_delay_ms", float),
    }
    out: Dict[str, Any] = {}
    for env_key, (field_name, caster) in mapping.items():
        if env.get(env_key, "") == "":
            continue
        try:
            value = caster(env[env_key])
        except ValueError as exc:
            logger.error("Invalid env for %s=%r: %s", env_key, env[env_key], exc)
            continue
        if field_name == "remove_delay_ms" and float(value).is_integer():
            value = int(value)
        out[field_name] = value
    return out


def load_config(
    path: Optional[Path | str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> ToastConfig:
    """Build a ToastConfig from packaged defaults, an optional YAML file and env.

    Precedence (lowest to highest): packaged defaults < file < environment.
    """
    defaults = resource_files("toast_store.data").joinpath("defaults.yaml").read_text(encoding="utf-8")
    data = _read_yaml(defaults, "packaged defaults")
    logger.debug("Loaded embedded toast config defaults")

    if path is not None:
        chosen = Path(path).expanduser()
        data.update(_read_yaml(chosen.read_text(encoding="utf-8"), str(chosen)))
        logger.debug("Loaded toast config from path: %s", chosen)

    data.update(config_from_env(env))
    validate_config_dict(data)
    config = ToastConfig(**data)
    logger.info("Toast config: capacity=%s remove_delay_ms=%s", config.capacity, config.remove_delay_ms)
    return config


__all__ = [
    "CAPACITY",
    "ENV_CAPACITY",
    "ENV_REMOVE_DELAY_MS",
    "REMOVE_DELAY_MS",
    "ToastConfig",
    "config_from_env",
    "load_config",
    "validate_config_dict",
]
