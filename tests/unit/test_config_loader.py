from __future__ import annotations

from pathlib import Path

import pytest

from campus_coffee.common.config_loader import load_config
from campus_coffee.common.errors import ConfigError

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

BASE_CONFIG = """osm:
  base_url: https://api.openstreetmap.org/api/0.6
  user_agent: CampusCoffee/1.0
  timeout:
    connect: 5
    read: 15
  retry:
    max_attempts: 2
    multiplier: 0.5
    max_wait: 4
  rate_limit_per_sec: 2
storage:
  pos_filename: pos.json
"""


def _write(directory: Path, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "campus_coffee.yml").write_text(text, encoding="utf-8")
    return directory


def test_load_config_from_repo_config_dir():
    bundle = load_config(REPO_CONFIG_DIR)
    assert bundle.osm["base_url"] == "https://api.openstreetmap.org/api/0.6"
    assert bundle.osm["user_agent"] == "CampusCoffee/1.0"
    assert bundle.storage["pos_filename"] == "pos.json"


def test_bundle_builds_http_settings(tmp_path: Path):
    bundle = load_config(_write(tmp_path / "base", BASE_CONFIG))

    timeout = bundle.osm_timeout()
    retry = bundle.osm_retry()

    assert (timeout.connect, timeout.read) == (5.0, 15.0)
    assert (retry.max_attempts, retry.multiplier, retry.max_wait) == (2, 0.5, 4.0)
    assert bundle.pos_store_path(tmp_path / "data") == tmp_path / "data" / "pos.json"


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = _write(tmp_path / "base", BASE_CONFIG)
    overlay = _write(
        tmp_path / "overlay",
        """osm:
  base_url: https://osm.example.test/api/0.6
  timeout:
    read: 60
""",
    )

    bundle = load_config(base, overlay_config_dir=overlay)

    assert bundle.osm["base_url"] == "https://osm.example.test/api/0.6"
    assert bundle.osm["timeout"] == {"connect": 5, "read": 60}
    assert bundle.osm["user_agent"] == "CampusCoffee/1.0"


def test_load_config_ignores_missing_overlay_file(tmp_path: Path):
    base = _write(tmp_path / "base", BASE_CONFIG)
    (tmp_path / "overlay").mkdir()

    bundle = load_config(base, overlay_config_dir=tmp_path / "overlay")

    assert bundle.osm["rate_limit_per_sec"] == 2


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError, match="Missing config file"):
        load_config(tmp_path)


def test_load_config_missing_key_raises(tmp_path: Path):
    base = _write(tmp_path / "base", BASE_CONFIG.replace("  user_agent: CampusCoffee/1.0\n", ""))

    with pytest.raises(ConfigError, match="user_agent"):
        load_config(base)


def test_load_config_unknown_key_raises_unless_allowed(tmp_path: Path):
    base = _write(tmp_path / "base", BASE_CONFIG + "extra: true\n")

    with pytest.raises(ConfigError, match="Unknown keys in config: extra"):
        load_config(base)
    assert load_config(base, allow_unknown=True).storage["pos_filename"] == "pos.json"


@pytest.mark.parametrize(
    ("old", "new", "message"),
    [
        ("base_url: https://api.openstreetmap.org/api/0.6", "base_url: ftp://example", "base_url"),
        ("connect: 5", "connect: 0", "osm.timeout.connect"),
        ("max_attempts: 2", "max_attempts: -1", "osm.retry.max_attempts"),
        ("rate_limit_per_sec: 2", "rate_limit_per_sec: fast", "rate_limit_per_sec"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, old, new, message):
    base = _write(tmp_path / "base", BASE_CONFIG.replace(old, new))

    with pytest.raises(ConfigError, match=message):
        load_config(base)
