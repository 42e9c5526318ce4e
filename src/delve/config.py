from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "DELVE_"


class GenerationSettings(BaseModel):
    """Settings for building a level stack.

    Defaults follow the classic layout of five 42x24 floors, except that the
    spawn sits on the bottom floor (start_level 0) rather than the classic
    third floor; pass start_level=2 for that. Values can come
    from a YAML file, DELVE_* environment variables and CLI flags, merged by
    build_settings() in that order of precedence (later wins).
    """

    level_count: int = Field(5, ge=1, le=64, description="Number of stacked levels")
    width: int = Field(42, ge=5, le=512, description="Grid width shared by every level")
    height: int = Field(24, ge=5, le=512, description="Grid height shared by every level")
    seed: Optional[Union[int, str]] = Field(default=None, description="Master seed; None draws a random one")
    start_level: int = Field(0, ge=0, description="Level index holding the spawn")
    max_level_attempts: int = Field(32, ge=1, description="Recarves allowed per level")
    max_world_attempts: int = Field(32, ge=1, description="Full rerolls allowed when spawn cannot reach goal")

    @field_validator("seed", mode="before")
    @classmethod
    def numeric_seed(cls, v: Any) -> Any:
        # "42" from env or flags must seed like 42
        if isinstance(v, str) and v.strip().isdigit():
            v = int(v.strip())
        if isinstance(v, int) and not isinstance(v, bool) and v < 0:
            raise ValueError("seed must be non-negative")
        return v

    @model_validator(mode="after")
    def start_level_in_stack(self) -> "GenerationSettings":
        if self.start_level >= self.level_count:
            raise ValueError(f"start_level {self.start_level} must be below level_count {self.level_count}")
        return self


_ENV_FIELDS = {
    "LEVELS": "level_count",
    "WIDTH": "width",
    "HEIGHT": "height",
    "SEED": "seed",
    "START_LEVEL": "start_level",
    "MAX_LEVEL_ATTEMPTS": "max_level_attempts",
    "MAX_WORLD_ATTEMPTS": "max_world_attempts",
}


def settings_from_env(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect DELVE_* overrides. Values stay strings; pydantic coerces them."""
    env = os.environ if env is None else env
    out: Dict[str, Any] = {}
    for suffix, field_name in _ENV_FIELDS.items():
        value = env.get(ENV_PREFIX + suffix)
        if value is not None and value != "":
            out[field_name] = value
    if out:
        logger.debug("Settings from environment: %s", out)
    return out


def load_settings_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read settings from YAML; either top-level keys or a ``generation:`` section."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config root in {path} must be a mapping")
    section = raw.get("generation", raw)
    if not isinstance(section, dict):
        raise ConfigError(f"'generation' in {path} must be a mapping")
    logger.debug("Loaded settings file %s", path)
    return dict(section)


def build_settings(
    config_path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GenerationSettings:
    """Merge file < environment < explicit overrides into validated settings.

    None-valued overrides are ignored so unset CLI flags do not mask lower layers.
    """
    data: Dict[str, Any] = {}
    if config_path is not None:
        data.update(load_settings_file(config_path))
    data.update(settings_from_env(env))
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        settings = GenerationSettings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    logger.info(
        "Settings: %d levels, %dx%d, start level %d, seed=%r",
        settings.level_count,
        settings.width,
        settings.height,
        settings.start_level,
        settings.seed,
    )
    return settings
