"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from campus_coffee.common.errors import ConfigError

_OSM_KEYS = {"base_url", "user_agent", "timeout", "retry", "rate_limit_per_sec"}
_STORAGE_KEYS = {"pos_filename"}


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_app_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "config")
    _assert_required_keys(cfg, {"osm", "storage"}, "config")
    _assert_no_unknown_keys(cfg, {"osm", "storage"}, "config", allow_unknown)

    osm = cfg["osm"]
    _assert_mapping(osm, "osm")
    _assert_required_keys(osm, _OSM_KEYS, "osm")
    _assert_no_unknown_keys(osm, _OSM_KEYS, "osm", allow_unknown)
    if not str(osm["base_url"]).startswith(("http://", "https://")):
        raise ConfigError("osm.base_url must be an http(s) URL")
    if not str(osm["user_agent"]).strip():
        raise ConfigError("osm.user_agent must not be blank")

    _assert_mapping(osm["timeout"], "osm.timeout")
    _assert_required_keys(osm["timeout"], {"connect", "read"}, "osm.timeout")
    _assert_positive_number(osm["timeout"]["connect"], "osm.timeout.connect")
    _assert_positive_number(osm["timeout"]["read"], "osm.timeout.read")

    _assert_mapping(osm["retry"], "osm.retry")
    _assert_required_keys(osm["retry"], {"max_attempts", "multiplier", "max_wait"}, "osm.retry")
    _assert_positive_number(osm["retry"]["max_attempts"], "osm.retry.max_attempts")
    _assert_positive_number(osm["rate_limit_per_sec"], "osm.rate_limit_per_sec")

    storage = cfg["storage"]
    _assert_mapping(storage, "storage")
    _assert_required_keys(storage, _STORAGE_KEYS, "storage")
    _assert_no_unknown_keys(storage, _STORAGE_KEYS, "storage", allow_unknown)

    return cfg
