"""Configuration model, loading and validation for Corroborate analyses."""

from __future__ import annotations

from corroborate.config.loader import config_from_mapping, load_config
from corroborate.config.model import (
    AggregationConfig,
    CorroborateConfig,
    default_aggregation_config,
    default_config,
)
from corroborate.config.validator import validate_config_file

__all__ = [
    "AggregationConfig",
    "CorroborateConfig",
    "config_from_mapping",
    "default_aggregation_config",
    "default_config",
    "load_config",
    "validate_config_file",
]
