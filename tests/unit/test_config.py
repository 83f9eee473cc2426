from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from phonename.config import ConfigError, LookupSettings, load_settings


EXAMPLE = Path(__file__).resolve().parents[2] / "config" / "example.yaml"


def test_defaults_without_file(monkeypatch):
    for var in ("PNL_REGION_CODE", "PNL_DEBUG_SCREENSHOT", "PNL_OPS_JSON"):
        monkeypatch.delenv(var, raising=False)
    s = load_settings(None)
    assert s.provider.base_url == "https://www.truecaller.com/search"
    assert s.provider.region_code == "ke"
    assert s.timeouts.navigation_ms == 30000
    assert s.timeouts.settle_ms == 5000
    assert s.debug.screenshot_path == "/tmp/truecaller_debug.png"
    assert [p.label for p in s.extraction.partial_patterns] == ["Name", "Owner", "Registered to"]
    assert s.extraction.web_locators[0] == '[data-testid="profile-name"]'
    assert s.extraction.web_locators[-1] == "h1"
    assert s.ops.logging.ops_json is False


def test_example_config_matches_defaults(monkeypatch):
    for var in ("PNL_REGION_CODE", "PNL_DEBUG_SCREENSHOT", "PNL_OPS_JSON"):
        monkeypatch.delenv(var, raising=False)
    s = load_settings(EXAMPLE)
    d = LookupSettings()
    assert s.extraction == d.extraction
    assert s.timeouts == d.timeouts
    assert s.provider == d.provider


def test_partial_yaml_keeps_other_defaults(tmp_path: Path):
    cfg = tmp_path / "c.yaml"
    cfg.write_text("timeouts:\n  settle_ms: 100\nprovider:\n  region_code: tz\n", encoding="utf-8")
    s = load_settings(cfg)
    assert s.timeouts.settle_ms == 100
    assert s.timeouts.navigation_ms == 30000
    assert s.provider.region_code == "tz"


def test_env_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("PNL_REGION_CODE", "ug")
    monkeypatch.setenv("PNL_DEBUG_SCREENSHOT", str(tmp_path / "d.png"))
    monkeypatch.setenv("PNL_OPS_JSON", "1")
    s = load_settings(None)
    assert s.provider.region_code == "ug"
    assert s.debug.screenshot_path == str(tmp_path / "d.png")
    assert s.ops.logging.ops_json is True


def test_empty_file_is_defaults(tmp_path: Path):
    cfg = tmp_path / "empty.yaml"
    cfg.write_text("", encoding="utf-8")
    assert load_settings(cfg).timeouts.navigation_ms == 30000


@pytest.mark.parametrize(
    "content",
    [
        "timeouts: [1, 2",
        "- just\n- a list\n",
        "timeouts:\n  navigation_ms: soon\n",
    ],
)
def test_bad_files_raise_config_error(tmp_path: Path, content: str):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(cfg)


def test_missing_file_raises_config_error(tmp_path: Path):
    with pytest.raises(ConfigError, match="file not found"):
        load_settings(tmp_path / "missing.yaml")


def test_unreadable_file_raises_config_error(tmp_path: Path):
    cfg = tmp_path / "locked.yaml"
    cfg.write_text("provider:\n  region_code: ug\n", encoding="utf-8")
    with patch.object(Path, "open", side_effect=PermissionError("Permission denied")):
        with pytest.raises(ConfigError, match="cannot read"):
            load_settings(cfg)
