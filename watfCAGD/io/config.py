"""
Tolerance configuration from YAML files.

Example YAML format:
    tolerance:
      epsilon: 1.0e-10
      max_tolerance: 1.0e-6
      min_tolerance: 1.0e-3
      angle_tolerance: 1.0e-7
      max_iterations: 200

Every key is optional; missing keys keep their default value.
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..core.errors import InputValidationError
from ..core.tolerance import DEFAULT_TOLERANCE, Tolerance

logger = logging.getLogger(__name__)

TOLERANCE_KEYS = tuple(f.name for f in fields(Tolerance))


def tolerance_from_dict(mapping: Optional[Mapping[str, Any]]) -> Tolerance:
    """
    Build a Tolerance from a mapping of field overrides.

    Parameters:
        mapping: Keys from TOLERANCE_KEYS; None or empty gives the defaults

    Returns:
        Tolerance
    """
    if not mapping:
        return DEFAULT_TOLERANCE
    if not isinstance(mapping, Mapping):
        raise InputValidationError(
            f"Tolerance configuration must be a mapping, got {type(mapping).__name__}."
        )

    unknown = sorted(set(mapping) - set(TOLERANCE_KEYS))
    if unknown:
        raise InputValidationError(
            f"Unknown tolerance keys: {', '.join(map(str, unknown))}. "
            f"Expected any of: {', '.join(TOLERANCE_KEYS)}."
        )

    overrides: Dict[str, Any] = {}
    for key, value in mapping.items():
        try:
            overrides[key] = int(value) if key == "max_iterations" else float(value)
        except (TypeError, ValueError) as exc:
            raise InputValidationError(f"Tolerance '{key}' is not a number: {value!r}") from exc

    return DEFAULT_TOLERANCE.with_overrides(**overrides)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return {}

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InputValidationError(f"Config file {path} must contain a YAML mapping.")
    return data


def load_config(path: Union[str, Path]) -> Tolerance:
    """
    Load tolerances from a YAML file.

    Parameters:
        path: Path to the YAML file

    Returns:
        Tolerance built from the file's `tolerance:` section
    """
    path = Path(path)
    data = _read_yaml(path)
    tol = tolerance_from_dict(data.get("tolerance"))
    logger.info("Tolerances loaded from %s", path)
    return tol
