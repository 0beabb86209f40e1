"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from campus_coffee.common.constants import CONFIG_FILENAME
from campus_coffee.common.errors import ConfigError
from campus_coffee.common.fs import read_yaml
from campus_coffee.common.http import RetryConfig, TimeoutConfig
from campus_coffee.common.schema import validate_app_config


@dataclass(frozen=True)
class ConfigBundle:
    osm: dict
    storage: dict

    def osm_timeout(self) -> TimeoutConfig:
        timeout = self.osm["timeout"]
        return TimeoutConfig(connect=float(timeout["connect"]), read=float(timeout["read"]))

    def osm_retry(self) -> RetryConfig:
        retry = self.osm["retry"]
        return RetryConfig(
            max_attempts=int(retry["max_attempts"]),
            multiplier=float(retry["multiplier"]),
            max_wait=float(retry["max_wait"]),
        )

    def pos_store_path(self, data_dir: Path) -> Path:
        return data_dir / self.storage["pos_filename"]


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
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path) or {}
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
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    cfg = validate_app_config(cfg, allow_unknown=allow_unknown)
    return ConfigBundle(osm=cfg["osm"], storage=cfg["storage"])
