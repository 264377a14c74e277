"""
Unit tests for hand_posing.project_config module.

Tests:
- Configuration dataclasses and defaults
- JSON serialization
- Config file discovery and loading
- Applying to global constants
"""

import json
import logging

import pytest

from hand_posing import config as cfg
from hand_posing.project_config import (
    CONFIG_FILENAME,
    GeometryConfig,
    LoggingConfig,
    ProjectConfig,
    apply_config_to_globals,
    create_sample_config,
    find_config_file,
    load_config,
)


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Empty working directory and home so no real config is found."""
    work = tmp_path / "work"
    home = tmp_path / "home"
    work.mkdir()
    home.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setenv("HOME", str(home))
    return work, home


@pytest.fixture
def restore_globals():
    saved = (cfg.EPSILON, cfg.ANGLE_TIE_TOLERANCE_DEG)
    yield
    cfg.EPSILON, cfg.ANGLE_TIE_TOLERANCE_DEG = saved


class TestDefaults:
    """Tests for configuration defaults."""

    def test_geometry_defaults_match_globals(self):
        config = GeometryConfig()
        assert config.epsilon == 1e-12
        assert config.angle_tie_tolerance_deg == 1e-6

    def test_logging_defaults(self):
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.json_file is None
        assert not config.verbose

    @pytest.mark.parametrize("name,expected", [
        ("DEBUG", logging.DEBUG),
        ("warning", logging.WARNING),
        ("LOUD", logging.INFO),
    ])
    def test_level_number(self, name, expected):
        assert LoggingConfig(level=name).level_number == expected


class TestSerialization:
    """Tests for dictionary and JSON conversion."""

    def test_round_trip(self):
        config = ProjectConfig()
        config.logging.level = "DEBUG"
        config.logging.verbose = True

        restored = ProjectConfig.from_json(config.to_json())

        assert restored == config

    def test_ignores_unknown_and_comment_keys(self):
        config = ProjectConfig.from_dict({
            "_comment": "top",
            "geometry": {"_comment": "thresholds", "epsilon": 1e-10, "unknown": 3},
            "plugins": {"enabled": True},
            "logging": "not a section",
            "service": {"max_attempts": 3},
        })
        assert config.geometry.epsilon == 1e-10
        assert not hasattr(config.geometry, "unknown")
        assert config.logging == LoggingConfig()
        assert set(config.to_dict()) == {"geometry", "logging"}

    def test_save_and_load(self, tmp_path):
        config = ProjectConfig()
        config.geometry.angle_tie_tolerance_deg = 1e-4
        path = tmp_path / CONFIG_FILENAME
        config.save(path)

        assert ProjectConfig.load(path) == config

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ProjectConfig.load(tmp_path / "missing.json")


class TestFindConfig:
    """Tests for config file discovery."""

    def test_nothing_found(self, isolated_dirs):
        assert find_config_file() is None

    def test_explicit_path(self, isolated_dirs, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text("{}", encoding="utf-8")
        assert find_config_file(explicit_config=path) == path

    def test_missing_explicit_falls_back(self, isolated_dirs, caplog):
        work, _ = isolated_dirs
        (work / CONFIG_FILENAME).write_text("{}", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="hand_posing"):
            found = find_config_file(explicit_config=work / "nope.json")

        assert found.name == CONFIG_FILENAME
        assert "Explicit config not found" in caplog.text

    def test_scene_directory_before_cwd(self, isolated_dirs, tmp_path):
        work, _ = isolated_dirs
        scene_dir = tmp_path / "scenes"
        scene_dir.mkdir()
        (scene_dir / CONFIG_FILENAME).write_text("{}", encoding="utf-8")
        (work / CONFIG_FILENAME).write_text("{}", encoding="utf-8")

        found = find_config_file(scene_path=scene_dir / "mug.json")

        assert found == scene_dir / CONFIG_FILENAME

    def test_home_directory(self, isolated_dirs):
        _, home = isolated_dirs
        (home / CONFIG_FILENAME).write_text("{}", encoding="utf-8")
        assert find_config_file() == home / CONFIG_FILENAME


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, isolated_dirs):
        assert load_config() == ProjectConfig()

    def test_reads_file(self, isolated_dirs):
        work, _ = isolated_dirs
        (work / CONFIG_FILENAME).write_text(
            json.dumps({"logging": {"level": "DEBUG"}}), encoding="utf-8")
        assert load_config().logging.level == "DEBUG"

    def test_invalid_file_falls_back(self, isolated_dirs, caplog):
        work, _ = isolated_dirs
        (work / CONFIG_FILENAME).write_text("{broken", encoding="utf-8")

        with caplog.at_level(logging.ERROR, logger="hand_posing"):
            config = load_config()

        assert config == ProjectConfig()
        assert "Failed to load config" in caplog.text


class TestApply:
    """Tests for apply_config_to_globals."""

    def test_apply_to_globals(self, restore_globals):
        config = ProjectConfig()
        config.geometry.epsilon = 1e-8
        config.geometry.angle_tie_tolerance_deg = 0.01

        apply_config_to_globals(config)

        assert cfg.EPSILON == 1e-8
        assert cfg.ANGLE_TIE_TOLERANCE_DEG == 0.01


class TestSampleConfig:
    """Tests for create_sample_config."""

    def test_sample_loads_as_defaults(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        create_sample_config(path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert "_comment" in data
        assert {key for key in data if not key.startswith("_")} == {"geometry", "logging"}
        assert ProjectConfig.load(path) == ProjectConfig()
