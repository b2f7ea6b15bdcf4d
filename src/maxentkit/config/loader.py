"""
Training parameter loading.

Supports YAML files with environment variable interpolation and
inheritance from a sibling ``base.yaml``, and Java-style properties files.
Nested YAML mappings become namespaced keys (``tokenizer.Iterations``).
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from maxentkit.config.parameters import TrainingParameters
from maxentkit.utils.logging import get_logger

log = get_logger(__name__)

PROPERTIES_SUFFIXES = {".properties", ".params"}


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{full_key}."))
        elif isinstance(value, list):
            msg = f"Parameter {full_key!r} must be a scalar, got a list"
            raise ValueError(msg)
        else:
            flat[full_key] = value
    return flat


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Parameter file {path} must contain a mapping"
        raise ValueError(msg)
    return _process_config_values(data)


def load_parameters(
    path: Path,
    base_path: Path | None = None,
) -> TrainingParameters:
    """
    Load training parameters from a YAML or properties file.

    Args:
        path: Parameter file. ``.properties`` / ``.params`` files are read
            as ``key=value`` lines, anything else as YAML.
        base_path: Optional YAML file to inherit from. Defaults to a
            ``base.yaml`` next to ``path`` when one exists.

    Returns:
        Parameter bag.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Parameter file not found: {path}")

    if path.suffix in PROPERTIES_SUFFIXES:
        parameters = TrainingParameters()
        with path.open(encoding="utf-8") as f:
            parameters.load(f)
        log.info("Loaded training parameters", path=str(path), n_keys=len(parameters))
        return parameters

    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != path
            else {}
        )

    merged = _deep_merge(base_data, load_yaml(path))
    parameters = TrainingParameters(_flatten(merged))
    log.info("Loaded training parameters", path=str(path), n_keys=len(parameters))
    return parameters


def save_parameters(parameters: TrainingParameters, path: Path) -> Path:
    """Write parameters as a properties file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        parameters.serialize(f)
    return path
