from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict

ENV_PREFIX = "OBJCATALOG_"
TOML_TABLE = "objcatalog"


class CatalogSettings(BaseModel):
    # "error" raises DuplicateRelationError; "override" keeps the later relation.
    duplicate_fields: Literal["error", "override"] = "error"
    # "capture" replays the result of the single invocation made by apply();
    # "reinvoke" calls the method again for every enumerator.
    method_results: Literal["capture", "reinvoke"] = "capture"
    include_properties: bool = True
    include_instance_attributes: bool = True

    model_config = ConfigDict(extra="ignore", frozen=True)


def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)  # type: ignore[index]
        else:
            target[key] = value
    return target


def _load_toml(path: Path | None) -> Dict[str, Any]:
    if path is None or not path.exists():
        return {}
    with path.open("rb") as f:
        data = tomllib.load(f)
    section = data.get(TOML_TABLE, {})
    return section if isinstance(section, dict) else {}


def _extract_prefixed(source: Dict[str, str], *, prefix: str = ENV_PREFIX) -> Dict[str, Any]:
    return {
        key.removeprefix(prefix).lower(): value
        for key, value in source.items()
        if key.startswith(prefix)
    }


def load_settings(
    *,
    config_path: Path | None = None,
    overrides: Dict[str, Any] | None = None,
) -> CatalogSettings:
    """Merge defaults, a TOML ``[objcatalog]`` table, ``OBJCATALOG_*`` env vars and overrides."""
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    merged: Dict[str, Any] = {}
    _deep_update(merged, _load_toml(config_path))
    _deep_update(merged, _extract_prefixed(dict(os.environ)))
    if overrides:
        _deep_update(merged, overrides)

    return CatalogSettings(**merged)


__all__ = [
    "CatalogSettings",
    "ENV_PREFIX",
    "load_settings",
]
