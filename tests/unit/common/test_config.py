"""Tests for common.config module."""

from pathlib import Path

import pytest

from common.config import (
    MIN_BODY_LENGTH,
    PRO,
    PRO_MOVE,
    AppConfig,
    find_config_path,
    load_config,
    parse_config,
)

CONFIG_DIR = Path(__file__).resolve().parents[3] / "configs"


class TestDeviceProfiles:
    def test_line_gap(self) -> None:
        assert PRO_MOVE.line_gap == pytest.approx(11)
        assert PRO.line_gap == pytest.approx(14)

    def test_content_width(self) -> None:
        assert PRO.content_width == pytest.approx(960)
        assert PRO_MOVE.content_width == pytest.approx(536)

    def test_profiles_are_immutable(self) -> None:
        with pytest.raises(AttributeError):
            PRO.base_font_size = 10


class TestParseConfig:
    def test_empty_dict_gives_defaults(self) -> None:
        config = parse_config({})
        assert config == AppConfig()
        assert config.min_body_length == MIN_BODY_LENGTH
        assert [p.key for p in config.device_profiles] == ["pro_move", "pro"]

    def test_http_overrides(self) -> None:
        config = parse_config({"http": {"request_timeout": 5, "max_retries": 1}})
        assert config.http.request_timeout == 5
        assert config.http.max_retries == 1
        assert config.http.base_delay == 1.0

    def test_custom_profiles(self) -> None:
        config = parse_config({
            "device_profiles": [
                {
                    "key": "small",
                    "name": "Small Reader",
                    "page_width": 400,
                    "page_height": 600,
                    "margins": {"top": 10, "right": 10, "bottom": 10, "left": 10},
                    "base_font_size": 14,
                }
            ],
            "index_profile": "small",
        })
        profile = config.profile("small")
        assert profile.label == "Small Reader"
        assert profile.destination == "smallStart"
        assert profile.line_height_multiplier == 1.5

    def test_unknown_profile_raises(self) -> None:
        with pytest.raises(KeyError):
            AppConfig().profile("kindle")


class TestLoadConfig:
    def test_prod_matches_builtin_profiles(self) -> None:
        config = load_config("prod", CONFIG_DIR)
        assert config.profile("pro_move").margins == PRO_MOVE.margins
        assert config.profile("pro").page_width == PRO.page_width
        assert config.profile("pro").image_align == "left"
        assert config.profile("pro_move").image_align == "center"

    def test_env_var_selects_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONFIG_ENV", "local")
        config = load_config(config_dir=CONFIG_DIR)
        assert config.http.max_retries == 2

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            find_config_path("missing", tmp_path)
