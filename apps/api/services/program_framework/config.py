"""
Configuration Service

Loads program rules from YAML files.
Allows changing business rules without code changes.

Usage:
    config = ConfigService.get()

    # Get the per-day exercise cap
    cap = ConfigService.get_max_exercises_per_day()

    # Snapshot rules for one generator
    rules = ProgramRules.from_config()

    # Reload config without restart
    ConfigService.reload()
"""

import logging
import os
from dataclasses import dataclass
from functools import reduce
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Load and cache configuration from YAML files.
    """

    _config: Optional[Dict[str, Any]] = None
    _load_errors: List[str] = []
    _config_dir: Path = Path(__file__).parent.parent.parent / "config"

    @classmethod
    def get(cls, key: str = None, default: Any = None) -> Any:
        """
        Get configuration value.

        Args:
            key: Dot-separated key (e.g., "program_rules.limits.max_exercises_per_day")
            default: Default value if key not found

        Returns:
            Configuration value or entire config if no key provided
        """
        if cls._config is None:
            cls._load()

        if key is None:
            return cls._config

        try:
            keys = key.split(".")
            value = reduce(lambda d, k: d[k], keys, cls._config)
            return value
        except (KeyError, TypeError):
            return default

    @classmethod
    def reload(cls):
        """Reload configuration from files."""
        cls._config = None
        cls._load()
        logger.info("Configuration reloaded")

    @classmethod
    def reset(cls):
        """Drop cached config; next access loads again."""
        cls._config = None
        cls._load_errors = []

    @classmethod
    def load_errors(cls) -> List[str]:
        """Files that failed to load on the last load, as "<file>: <error>"."""
        if cls._config is None:
            cls._load()
        return list(cls._load_errors)

    @classmethod
    def config_dir(cls) -> Path:
        override = os.getenv("PROGRAM_RULES_DIR")
        return Path(override) if override else cls._config_dir

    @classmethod
    def _load(cls):
        """Load all configuration files."""
        cls._load_defaults()
        cls._load_errors = []

        config_files = [
            "program_rules.yaml",
        ]

        config_dir = cls.config_dir()
        for filename in config_files:
            filepath = config_dir / filename
            if not filepath.exists():
                logger.debug(f"Config file not found: {filepath}")
                continue
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error loading {filename}: {e}")
                cls._load_errors.append(f"{filename}: {e}")
                continue
            if data and not isinstance(data, dict):
                logger.error(f"Error loading {filename}: top level is not a mapping")
                cls._load_errors.append(f"{filename}: top level is not a mapping")
                continue
            if data:
                # Merge over defaults, using filename (without extension) as namespace
                namespace = filename.rsplit(".", 1)[0]
                cls._config[namespace] = _deep_merge(cls._config.get(namespace, {}), data)
                logger.debug(f"Loaded config: {filename}")

    @classmethod
    def _load_defaults(cls):
        """Load default configuration from constants."""
        from .constants import (
            LARGE_GROUP_DAILY_CAP,
            MAX_EXERCISES_PER_DAY,
            MAX_PRIMARY_LIFTS_PER_DAY,
            MAX_SECONDARY_COMPOUNDS_PER_DAY,
            MINUTES_PER_SET,
            SHORT_SESSION_SETS,
            SHORT_SESSION_THRESHOLD_MINUTES,
            STANDARD_SETS,
            TRAINING_MAX_FACTOR,
            WEEKLY_VOLUME_CAP,
            WEIGHT_INCREMENT,
        )

        cls._config = {
            "program_rules": {
                "limits": {
                    "max_exercises_per_day": MAX_EXERCISES_PER_DAY,
                    "large_group_daily_cap": LARGE_GROUP_DAILY_CAP,
                    "weekly_volume_cap": WEEKLY_VOLUME_CAP,
                    "max_primary_lifts_per_day": MAX_PRIMARY_LIFTS_PER_DAY,
                    "max_secondary_compounds_per_day": MAX_SECONDARY_COMPOUNDS_PER_DAY,
                },
                "session": {
                    "minutes_per_set": MINUTES_PER_SET,
                    "short_session_threshold_minutes": SHORT_SESSION_THRESHOLD_MINUTES,
                    "short_session_sets": SHORT_SESSION_SETS,
                    "standard_sets": STANDARD_SETS,
                },
                "training_max": {
                    "factor": TRAINING_MAX_FACTOR,
                    "weight_increment": WEIGHT_INCREMENT,
                },
            }
        }

    @classmethod
    def set(cls, key: str, value: Any):
        """
        Set a configuration value (in memory only).
        Useful for testing.
        """
        if cls._config is None:
            cls._load()

        keys = key.split(".")
        d = cls._config
        for k in keys[:-1]:
            if k not in d:
                d[k] = {}
            d = d[k]
        d[keys[-1]] = value

    @classmethod
    def get_max_exercises_per_day(cls) -> int:
        return int(cls.get("program_rules.limits.max_exercises_per_day", 8))

    @classmethod
    def get_large_group_daily_cap(cls) -> int:
        return int(cls.get("program_rules.limits.large_group_daily_cap", 2))

    @classmethod
    def get_weekly_volume_cap(cls) -> int:
        """Max weekly sets per large muscle group."""
        return int(cls.get("program_rules.limits.weekly_volume_cap", 15))

    @classmethod
    def get_max_primary_lifts_per_day(cls) -> int:
        return int(cls.get("program_rules.limits.max_primary_lifts_per_day", 2))

    @classmethod
    def get_max_secondary_compounds_per_day(cls) -> int:
        return int(cls.get("program_rules.limits.max_secondary_compounds_per_day", 3))

    @classmethod
    def get_training_max_factor(cls) -> float:
        return float(cls.get("program_rules.training_max.factor", 0.9))

    @classmethod
    def get_weight_increment(cls) -> float:
        """Plate step that training maxes and set weights round to."""
        return float(cls.get("program_rules.training_max.weight_increment", 2.5))

    @classmethod
    def get_minutes_per_set(cls) -> float:
        return float(cls.get("program_rules.session.minutes_per_set", 2.5))

    @classmethod
    def get_short_session_threshold(cls) -> int:
        return int(cls.get("program_rules.session.short_session_threshold_minutes", 45))

    @classmethod
    def get_short_session_sets(cls) -> int:
        return int(cls.get("program_rules.session.short_session_sets", 2))

    @classmethod
    def get_standard_sets(cls) -> int:
        return int(cls.get("program_rules.session.standard_sets", 3))


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class ProgramRules:
    """Immutable snapshot of the numeric rules one generator works with."""
    max_exercises_per_day: int = 8
    large_group_daily_cap: int = 2
    weekly_volume_cap: int = 15
    max_primary_lifts_per_day: int = 2
    max_secondary_compounds_per_day: int = 3
    minutes_per_set: float = 2.5
    short_session_threshold_minutes: int = 45
    short_session_sets: int = 2
    standard_sets: int = 3
    training_max_factor: float = 0.9
    weight_increment: float = 2.5

    @classmethod
    def from_config(cls) -> "ProgramRules":
        return cls(
            max_exercises_per_day=ConfigService.get_max_exercises_per_day(),
            large_group_daily_cap=ConfigService.get_large_group_daily_cap(),
            weekly_volume_cap=ConfigService.get_weekly_volume_cap(),
            max_primary_lifts_per_day=ConfigService.get_max_primary_lifts_per_day(),
            max_secondary_compounds_per_day=ConfigService.get_max_secondary_compounds_per_day(),
            minutes_per_set=ConfigService.get_minutes_per_set(),
            short_session_threshold_minutes=ConfigService.get_short_session_threshold(),
            short_session_sets=ConfigService.get_short_session_sets(),
            standard_sets=ConfigService.get_standard_sets(),
            training_max_factor=ConfigService.get_training_max_factor(),
            weight_increment=ConfigService.get_weight_increment(),
        )

    def sets_for_session(self, max_session_minutes: Optional[int]) -> int:
        """Short sessions get fewer sets per exercise."""
        if max_session_minutes is not None and max_session_minutes < self.short_session_threshold_minutes:
            return self.short_session_sets
        return self.standard_sets
