"""Configuration file support for VulnSight (.vulnsight.yml)."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from vulnsight.tools import TOOLS

DEFAULT_CONFIG_NAME = ".vulnsight.yml"


@dataclass
class Config:
    """VulnSight configuration loaded from .vulnsight.yml."""

    enabled_tools: list[str] = field(default_factory=lambda: list(TOOLS))
    min_duration: float = 2.0
    max_duration: float = 4.0
    thinking_delay: float = 0.0
    fail_tools: list[str] = field(default_factory=list)


def load_config(config_path: str | None = None, project_root: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Priority: explicit --config path > .vulnsight.yml in project root > defaults.
    """
    path = None

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    elif project_root:
        candidate = Path(project_root) / DEFAULT_CONFIG_NAME
        if candidate.exists():
            path = candidate

    if path is None:
        return Config()

    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return Config()
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must be a YAML mapping, got {type(raw).__name__}")

    return _parse_config(raw)


def _tool_list(raw: dict, key: str) -> list[str]:
    tools = raw[key]
    if not isinstance(tools, list):
        raise ValueError(f"{key} must be a list")
    unknown = [t for t in tools if t not in TOOLS]
    if unknown:
        raise ValueError(f"{key} contains unknown tool(s): {', '.join(map(str, unknown))}")
    return tools


def _number(raw: dict, key: str) -> float:
    val = raw[key]
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise ValueError(f"{key} must be a number")
    if val < 0:
        raise ValueError(f"{key} must not be negative")
    return float(val)


def _parse_config(raw: dict) -> Config:
    """Parse and validate raw YAML dict into a Config object."""
    config = Config()

    if "enabled_tools" in raw:
        config.enabled_tools = _tool_list(raw, "enabled_tools")
        if not config.enabled_tools:
            raise ValueError("enabled_tools must not be empty")

    if "fail_tools" in raw:
        config.fail_tools = _tool_list(raw, "fail_tools")

    if "min_duration" in raw:
        config.min_duration = _number(raw, "min_duration")

    if "max_duration" in raw:
        config.max_duration = _number(raw, "max_duration")

    if config.min_duration > config.max_duration:
        raise ValueError("min_duration must not exceed max_duration")

    if "thinking_delay" in raw:
        config.thinking_delay = _number(raw, "thinking_delay")

    return config
