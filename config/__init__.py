"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML config file.

    Relative names resolve against the config/ directory; absolute paths are
    read as given.
    """
    config_path = Path(filename)
    if not config_path.is_absolute():
        config_path = Path(__file__).parent / filename
    with open(config_path) as f:
        return yaml.safe_load(f)
