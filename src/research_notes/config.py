from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv(override=True)

CONFIG_FILE_PATH = Path(__file__).parent / "config.yaml"


def load_config(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a given YAML file path.

    Args:
        config_path: Explicit path to the configuration file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        FileNotFoundError: If the configuration file is not found.
        ValueError: If there is an error parsing the YAML file.
    """
    path = Path(config_path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration file not found: {path}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file '{path}': {e}") from e

    return data or {}


def default_config() -> Dict[str, Any]:
    """Load the packaged config.yaml, or the file named by RESEARCH_NOTES_CONFIG."""
    override = os.getenv("RESEARCH_NOTES_CONFIG", "").strip()
    if override:
        return load_config(override)
    try:
        return load_config(CONFIG_FILE_PATH)
    except FileNotFoundError:
        return {}


def section(cfg: Dict[str, Any] | None, name: str) -> Dict[str, Any]:
    """Return a copy of a top-level mapping from the config, {} when absent."""
    if not isinstance(cfg, dict):
        return {}
    value = cfg.get(name)
    return dict(value) if isinstance(value, dict) else {}
