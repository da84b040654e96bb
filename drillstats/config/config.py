from __future__ import annotations

"""Configuration loading and validation for drillstats.

Loads the packaged YAML defaults, overlays an optional user file, and
validates the result into a `StatsConfig`.
"""

from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


class ConfigError(ValueError):
    """Raised when a config file cannot be read or fails validation."""


DEFAULTS_PATH = Path(__file__).with_name("defaults.yml")


class StorageConfig(BaseModel):
    path: str = "./drill_stats.json"
    indent: Optional[int] = Field(default=None, ge=0)
    history_limit: Optional[int] = Field(default=None, gt=0)


class ScoreRankingConfig(BaseModel):
    min_attempts: int = Field(5, gt=0)


class MistakeRankingConfig(BaseModel):
    min_attempts: int = Field(3, gt=0)
    max_results: int = Field(5, gt=0)
    avg_time_threshold: Optional[float] = Field(default=None, gt=0)


class RankingConfig(BaseModel):
    score: ScoreRankingConfig = Field(default_factory=ScoreRankingConfig)
    mistake: MistakeRankingConfig = Field(default_factory=MistakeRankingConfig)


class DrillConfig(BaseModel):
    """Per-drill overrides; unset thresholds fall back to `ranking`."""

    kind: Literal["time", "mistake", "history"]
    name: Optional[str] = None
    min_attempts: Optional[int] = Field(default=None, gt=0)
    max_results: Optional[int] = Field(default=None, gt=0)
    avg_time_threshold: Optional[float] = Field(default=None, gt=0)


class StatsConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    drills: Dict[str, DrillConfig] = Field(default_factory=dict)
    explain: bool = False

    @field_validator("drills")
    @classmethod
    def _drill_ids(cls, v: Dict[str, DrillConfig]) -> Dict[str, DrillConfig]:
        for drill_id in v:
            if not drill_id or not str(drill_id).strip():
                raise ValueError("drill ids must be non-empty")
        return v


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML on top of the packaged defaults.

    Args:
        path: Optional path to a YAML config. If None, only defaults are used.

    Returns:
        A dictionary with raw configuration values.
    """
    cfg = _load_yaml(DEFAULTS_PATH)
    if path:
        cfg = _merge(cfg, _load_yaml(Path(path)))
    return cfg


def validate_config(cfg: Dict[str, Any]) -> StatsConfig:
    """Validate a raw configuration dictionary into a `StatsConfig`."""
    try:
        return StatsConfig.model_validate(cfg)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration:\n{e}") from e
