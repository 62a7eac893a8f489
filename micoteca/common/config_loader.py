"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from micoteca.common.errors import ConfigError
from micoteca.common.fs import read_yaml
from micoteca.common.schema import validate_app_config

CONFIG_FILENAME = "micoteca.yml"


@dataclass(frozen=True)
class ConfigBundle:
    config_dir: Path
    datasets: dict[str, str]
    regions: dict[str, str]
    region_filter: dict
    search: dict
    calendar: dict
    catalog: dict
    http: dict

    def region_path(self, name_or_path: str) -> Path:
        """Resolve a configured region name, falling back to a literal path."""
        if name_or_path in self.regions:
            return self.config_dir / self.regions[name_or_path]
        return Path(name_or_path)


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
    cfg = validate_app_config(
        _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(
        config_dir=config_dir,
        datasets=dict(cfg["datasets"]),
        regions=dict(cfg["regions"]),
        region_filter=dict(cfg["region_filter"]),
        search=dict(cfg["search"]),
        calendar=dict(cfg["calendar"]),
        catalog=dict(cfg["catalog"]),
        http=dict(cfg["http"]),
    )
