"""Filesystem helpers for config and geometry records.

YAML only; uses safe_load so config files cannot execute code.
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load YAML file safely.

    Parameters
    ----------
    path : Union[str, Path]
        YAML file path

    Returns
    -------
    Dict[str, Any]
        Parsed YAML content ({} for an empty file)

    Raises
    ------
    FileNotFoundError
        If file doesn't exist
    yaml.YAMLError
        If YAML parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e
