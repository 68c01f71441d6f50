"""Tests for the configuration module."""

import configparser
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from flickshelf.config import (
    STORE_ENV_VAR,
    AppConfig,
    LoggingConfig,
    PlaybackConfig,
    StoreConfig,
    _expand_env_vars,
    find_config_file,
    get_config_paths,
    load_config,
    parse_list_setting,
    save_default_config,
)
from flickshelf.ordering import Display, Ordering
from flickshelf.state import STATE_FILE


@pytest.fixture(autouse=True)
def _no_store_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(STORE_ENV_VAR, raising=False)


class TestConfigModels:
    """Tests for configuration models."""

    def test_store_config_defaults(self) -> None:
        """Test StoreConfig has correct defaults."""
        cfg = StoreConfig()
        assert cfg.path is None
        assert cfg.state_file == STATE_FILE

    def test_playback_config_defaults(self) -> None:
        """Test PlaybackConfig has correct defaults."""
        cfg = PlaybackConfig()
        assert cfg.skip_short_ms == 15000
        assert cfg.skip_long_ms == 30000
        assert cfg.played_threshold_ms == 0

    def test_logging_level_normalized(self) -> None:
        """Test log levels are upper-cased and checked."""
        assert LoggingConfig(level="info").level == "INFO"
        with pytest.raises(ValidationError):
            LoggingConfig(level="chatty")

    def test_app_config_defaults(self) -> None:
        """Test AppConfig has correct defaults."""
        cfg = AppConfig()
        assert isinstance(cfg.store, StoreConfig)
        assert isinstance(cfg.playback, PlaybackConfig)
        assert cfg.lists == {}
        assert cfg.source is None
        assert cfg.store_root == Path.cwd()

    def test_store_root_expands_user(self) -> None:
        """Test the store path expands ~."""
        cfg = AppConfig(store=StoreConfig(path="~/media"))
        assert cfg.store_root == Path.home() / "media"

    def test_skip_must_be_positive(self) -> None:
        """Test skip distances must be positive."""
        with pytest.raises(ValidationError):
            PlaybackConfig(skip_short_ms=0)


class TestListSettingParsing:
    """Tests for "display,ordering" list settings."""

    def test_parse(self) -> None:
        """Test parsing a valid setting."""
        setting = parse_list_setting(" List , AirDate ")
        assert setting.display == Display.LIST
        assert setting.ordering == Ordering.AIRDATE

    def test_wrong_shape(self) -> None:
        """Test settings without exactly two parts are rejected."""
        with pytest.raises(ValueError):
            parse_list_setting("grid")

    def test_unknown_value(self) -> None:
        """Test unknown display modes are rejected."""
        with pytest.raises(ValueError):
            parse_list_setting("carousel,title")

    def test_lists_accept_strings_and_mappings(self) -> None:
        """Test list settings from INI strings and YAML mappings."""
        cfg = AppConfig.model_validate(
            {
                "lists": {
                    "movies": "grid,title",
                    "se1": {"display": "list", "ordering": "index"},
                }
            }
        )
        assert cfg.lists["movies"].ordering == Ordering.TITLE
        assert cfg.lists["se1"].display == Display.LIST


class TestEnvVarExpansion:
    """Tests for environment variable expansion."""

    def test_expand_simple_var(self) -> None:
        """Test expanding ${VAR} syntax."""
        os.environ["TEST_VAR"] = "test_value"
        try:
            result = _expand_env_vars("prefix_${TEST_VAR}_suffix")
            assert result == "prefix_test_value_suffix"
        finally:
            del os.environ["TEST_VAR"]

    def test_expand_dollar_var(self) -> None:
        """Test expanding $VAR syntax."""
        os.environ["TEST_VAR"] = "test_value"
        try:
            assert _expand_env_vars("prefix_$TEST_VAR") == "prefix_test_value"
        finally:
            del os.environ["TEST_VAR"]

    def test_expand_missing_var(self) -> None:
        """Test expanding missing variable returns empty string."""
        assert _expand_env_vars("${NONEXISTENT_VAR_12345}") == ""

    def test_expand_nested(self) -> None:
        """Test expanding variables inside dicts and lists."""
        os.environ["TEST_VAR"] = "test_value"
        try:
            result = _expand_env_vars({"key": ["${TEST_VAR}", "static"], "n": 3})
            assert result == {"key": ["test_value", "static"], "n": 3}
        finally:
            del os.environ["TEST_VAR"]


class TestConfigLoading:
    """Tests for configuration loading."""

    def test_load_nonexistent_file(self) -> None:
        """Test loading returns defaults when no config file exists."""
        cfg = load_config(Path("/nonexistent/flickshelf.ini"))
        assert isinstance(cfg, AppConfig)
        assert cfg.playback.skip_short_ms == 15000
        assert cfg.source is None

    def test_load_ini_config(self, tmp_path: Path) -> None:
        """Test loading configuration from INI file."""
        config_path = tmp_path / "flickshelf.ini"
        config_path.write_text(
            """
[store]
path = /media/sync

[playback]
skip_short_ms = 10000
played_threshold_ms = 30000

[logging]
level = info

[lists]
Movies = list,airdate
se1 = grid,index
""",
            encoding="utf-8",
        )

        cfg = load_config(config_path)
        assert cfg.source == config_path
        assert cfg.store.path == "/media/sync"
        assert cfg.store.state_file == STATE_FILE
        assert cfg.playback.skip_short_ms == 10000
        assert cfg.playback.skip_long_ms == 30000
        assert cfg.playback.played_threshold_ms == 30000
        assert cfg.logging.level == "INFO"
        # List ids keep their case
        assert cfg.lists["Movies"].ordering == Ordering.AIRDATE
        assert cfg.lists["se1"].display == Display.GRID

    def test_load_ini_blank_values_use_defaults(self, tmp_path: Path) -> None:
        """Test empty INI values fall back to defaults."""
        config_path = tmp_path / "flickshelf.ini"
        config_path.write_text("[store]\npath =\n\n[lists]\n", encoding="utf-8")
        cfg = load_config(config_path)
        assert cfg.store.path is None
        assert cfg.lists == {}

    def test_load_yaml_config(self, tmp_path: Path) -> None:
        """Test loading configuration from YAML file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            """
store:
  path: /media/sync
playback:
  skip_long_ms: 60000
lists:
  movies:
    display: list
    ordering: title
  tv: grid,airdate
""",
            encoding="utf-8",
        )

        cfg = load_config(config_path)
        assert cfg.store.path == "/media/sync"
        assert cfg.playback.skip_long_ms == 60000
        assert cfg.playback.skip_short_ms == 15000
        assert cfg.lists["movies"].display == Display.LIST
        assert cfg.lists["tv"].ordering == Ordering.AIRDATE

    def test_env_vars_expanded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ${VAR} references in the file are expanded."""
        monkeypatch.setenv("MEDIA_ROOT", "/mnt/media")
        config_path = tmp_path / "flickshelf.ini"
        config_path.write_text("[store]\npath = ${MEDIA_ROOT}/sync\n", encoding="utf-8")
        assert load_config(config_path).store.path == "/mnt/media/sync"

    def test_store_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test FLICKSHELF_STORE overrides the configured store path."""
        config_path = tmp_path / "flickshelf.ini"
        config_path.write_text("[store]\npath = /media/sync\n", encoding="utf-8")
        monkeypatch.setenv(STORE_ENV_VAR, "/elsewhere")
        assert load_config(config_path).store.path == "/elsewhere"

    def test_invalid_values_rejected(self, tmp_path: Path) -> None:
        """Test invalid values raise a validation error."""
        config_path = tmp_path / "flickshelf.ini"
        config_path.write_text("[playback]\nskip_short_ms = soon\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(config_path)

    def test_loads_are_independent(self, tmp_path: Path) -> None:
        """Test each load returns a fresh configuration."""
        config_path = tmp_path / "flickshelf.ini"
        config_path.write_text("[playback]\nskip_short_ms = 5000\n", encoding="utf-8")
        first = load_config(config_path)
        second = load_config(Path("/nonexistent/flickshelf.ini"))
        assert first.playback.skip_short_ms == 5000
        assert second.playback.skip_short_ms == 15000


class TestConfigPaths:
    """Tests for configuration path handling."""

    def test_get_config_paths_prefers_ini(self) -> None:
        """Test INI files are searched before YAML files."""
        paths = get_config_paths()
        assert paths[0] == Path.cwd() / "flickshelf.ini"
        assert all(p.suffix == ".ini" for p in paths[:2])

    def test_get_config_paths_includes_home(self) -> None:
        """Test that config paths include home directory."""
        home = Path.home()
        assert any(str(home) in str(p) for p in get_config_paths())

    def test_find_config_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the first existing file is found."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        assert find_config_file() is None

        (tmp_path / "config.yaml").write_text("{}", encoding="utf-8")
        assert find_config_file() == tmp_path / "config.yaml"

        (tmp_path / "flickshelf.ini").write_text("", encoding="utf-8")
        assert find_config_file() == tmp_path / "flickshelf.ini"


class TestDefaultConfig:
    """Tests for default config generation."""

    def test_save_default_config(self, tmp_path: Path) -> None:
        """Test saving default INI config creates valid file."""
        config_path = tmp_path / "flickshelf.ini"
        result_path = save_default_config(config_path)

        assert result_path == config_path
        parser = configparser.ConfigParser(interpolation=None)
        parser.read(config_path)
        for section in ("store", "playback", "logging", "lists"):
            assert parser.has_section(section)
        assert parser.get("store", "path") == "${FLICKSHELF_STORE}"

    def test_save_default_config_with_store(self, tmp_path: Path) -> None:
        """Test the generated file loads back with the given store."""
        config_path = tmp_path / "nested" / "flickshelf.ini"
        save_default_config(config_path, store_path="/media/sync")

        cfg = load_config(config_path)
        assert cfg.store.path == "/media/sync"
        assert cfg.playback.skip_short_ms == 15000
        assert cfg.logging.level == "WARNING"
        assert cfg.lists == {}
