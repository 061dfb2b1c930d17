"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from a JSON file
- Provides typed access to the registry's settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass for immutability after load
- Nested config sections map to sub-dataclasses
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AWSConfig:
    """Cloud backend configuration."""
    region: str = "us-east-1"
    node_groups: tuple[str, ...] = ()


@dataclass(frozen=True)
class RefreshConfig:
    """Periodic refresh configuration."""
    interval_seconds: int = 60


@dataclass(frozen=True)
class AscentConfig:
    """Root configuration."""
    aws: AWSConfig = field(default_factory=AWSConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    log_level: str = "WARNING"
    log_json: bool = False


def _env_override(data: dict, prefix: str = "ASCENT") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern ASCENT_SECTION_KEY.
    For example: ASCENT_AWS_REGION=eu-west-1, ASCENT_AWS_NODE_GROUPS=asg-a,asg-b
    """
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        parts = key[len(prefix) + 1:].lower().split("_", 1)
        if len(parts) == 2 and parts[0] in ("aws", "refresh"):
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
        else:
            data[key[len(prefix) + 1:].lower()] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes")
    return bool(value)


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}

    for f in dataclasses.fields(cls):
        if f.name not in filtered:
            continue
        val = filtered[f.name]
        # Comma-separated strings become tuples for tuple fields
        if f.type == "tuple[str, ...]":
            if isinstance(val, str):
                filtered[f.name] = tuple(v.strip() for v in val.split(",") if v.strip())
            elif isinstance(val, list):
                filtered[f.name] = tuple(val)
        elif f.type == "int" and isinstance(val, str):
            filtered[f.name] = int(val)

    return cls(**filtered)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "ASCENT",
) -> AscentConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (ASCENT_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to ascent.json in CWD.
        env_prefix: Environment variable prefix. Defaults to ASCENT.
    """
    config_path = Path(path) if path else Path("ascent.json")
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return AscentConfig(
        aws=_build_sub_config(AWSConfig, data.get("aws", {})),
        refresh=_build_sub_config(RefreshConfig, data.get("refresh", {})),
        log_level=data.get("log_level", "WARNING"),
        log_json=_as_bool(data.get("log_json", False)),
    )
