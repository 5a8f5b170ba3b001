"""Test suite for configuration loading and merging."""
import os
from dataclasses import FrozenInstanceError

import pytest
import yaml

from syncret.secrets.domains import config_loader
from syncret.secrets.domains.config_loader import (
    build_loader_config,
    load_config_file,
    normalize_suffix,
)
from syncret.secrets.domains.errors import ConfigError
from syncret.secrets.domains.models import LoaderConfig


@pytest.fixture
def config_file(tmp_path):
    """Fixture returning a helper that writes a YAML config file."""
    def _write(content, name="config.yml"):
        path = tmp_path / name
        with open(path, 'w') as f:
            yaml.dump(content, f)
        return path
    return _write


class TestBuildLoaderConfig:
    """Test suite for build_loader_config."""

    def test_defaults(self):
        config = build_loader_config(env={})

        assert config == LoaderConfig()
        assert config.secret_suffix == ".gpg"
        assert config.description_suffix == ".description"
        assert config.pattern_suffix == ".pattern"
        assert config.decrypt_command == "cat"
        assert config.fs_prefix == ""
        assert config.root_dir == ""
        assert config.trim is True

    def test_suffix_order(self):
        assert build_loader_config(env={}).suffixes == (".gpg", ".pattern", ".description")

    def test_environment_suffixes_are_normalized(self):
        env = {
            "SYNCRET_SUFFIX": "asc",
            "SYNCRET_DESCRIPTION_SUFFIX": "..desc",
            "SYNCRET_PATTERN_SUFFIX": ".re",
        }

        config = build_loader_config(env=env)

        assert config.secret_suffix == ".asc"
        assert config.description_suffix == ".desc"
        assert config.pattern_suffix == ".re"

    def test_empty_environment_values_fall_back_to_defaults(self):
        env = {"SYNCRET_SUFFIX": "...", "SYNCRET_DECRYPT": ""}

        config = build_loader_config(env=env)

        assert config.secret_suffix == ".gpg"
        assert config.decrypt_command == "cat"

    def test_environment_decrypt_and_prefix(self):
        env = {"SYNCRET_DECRYPT": "gpg-decrypt", "SYNCRET_PREFIX": "secrets/"}

        config = build_loader_config(env=env)

        assert config.decrypt_command == "gpg-decrypt"
        assert config.fs_prefix == "secrets/"

    @pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), ("No", False), ("TRUE", True), ("on", True)])
    def test_environment_trim(self, raw, expected):
        assert build_loader_config(env={"SYNCRET_TRIM": raw}).trim is expected

    def test_invalid_trim_is_config_error(self):
        with pytest.raises(ConfigError):
            build_loader_config(env={"SYNCRET_TRIM": "maybe"})

    def test_overrides_beat_environment(self):
        env = {"SYNCRET_PREFIX": "from-env/", "SYNCRET_TRIM": "true"}

        config = build_loader_config(env=env, overrides={"fs_prefix": "from-flag/", "trim": False})

        assert config.fs_prefix == "from-flag/"
        assert config.trim is False

    def test_none_overrides_are_ignored(self):
        env = {"SYNCRET_PREFIX": "from-env/"}

        config = build_loader_config(env=env, overrides={"fs_prefix": None, "trim": None})

        assert config.fs_prefix == "from-env/"
        assert config.trim is True

    def test_environment_beats_file(self):
        file_config = {"syncret": {"prefix": "from-file/", "decrypt": "file-decrypt"}}

        config = build_loader_config(env={"SYNCRET_PREFIX": "from-env/"}, file_config=file_config)

        assert config.fs_prefix == "from-env/"
        assert config.decrypt_command == "file-decrypt"

    def test_file_values(self):
        file_config = {"syncret": {"suffix": "asc", "trim": False, "pattern_suffix": ".regex"}}

        config = build_loader_config(env={}, file_config=file_config)

        assert config.secret_suffix == ".asc"
        assert config.pattern_suffix == ".regex"
        assert config.trim is False

    def test_root_dir_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = build_loader_config(env={}, overrides={"root_dir": "relative/root"})

        assert config.root_dir == os.path.join(str(tmp_path), "relative", "root")

    def test_unresolvable_root_dir_is_config_error(self, monkeypatch):
        def broken_abspath(path):
            raise FileNotFoundError("cwd is gone")

        monkeypatch.setattr(config_loader.os.path, "abspath", broken_abspath)

        with pytest.raises(ConfigError):
            build_loader_config(env={}, overrides={"root_dir": "relative"})

    def test_unknown_override_is_config_error(self):
        with pytest.raises(ConfigError):
            build_loader_config(env={}, overrides={"commit": True})

    def test_config_is_immutable(self):
        config = build_loader_config(env={})

        with pytest.raises(FrozenInstanceError):
            config.fs_prefix = "changed"


class TestNormalizeSuffix:
    """Test suite for normalize_suffix."""

    @pytest.mark.parametrize("raw,expected", [("gpg", ".gpg"), (".gpg", ".gpg"), ("..gpg", ".gpg"), ("", ""), ("..", "")])
    def test_normalize(self, raw, expected):
        assert normalize_suffix(raw) == expected


class TestLoadConfigFile:
    """Test suite for load_config_file."""

    def test_no_file_is_empty_config(self):
        assert load_config_file(env={}) == {}

    def test_explicit_path(self, config_file):
        path = config_file({"syncret": {"prefix": "secrets/"}, "aws": {"region": "eu-west-1"}})

        config = load_config_file(str(path), env={})

        assert config["syncret"]["prefix"] == "secrets/"
        assert config["aws"]["region"] == "eu-west-1"

    def test_path_from_environment(self, config_file):
        path = config_file({"syncret": {"trim": False}})

        config = load_config_file(env={"SYNCRET_CONFIG": str(path)})

        assert config["syncret"]["trim"] is False

    def test_default_location(self, tmp_path, monkeypatch, config_file):
        path = config_file({"gcp": {"project_id": "default-project"}}, name="default.yml")
        monkeypatch.setattr(config_loader, "DEFAULT_CONFIG_PATH", path)

        config = load_config_file(env={})

        assert config["gcp"]["project_id"] == "default-project"

    def test_explicit_missing_file_is_config_error(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config_file(str(tmp_path / "missing.yml"), env={})

        assert "not found" in str(exc_info.value)

    def test_empty_file_is_empty_config(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")

        assert load_config_file(str(path), env={}) == {}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError) as exc_info:
            load_config_file(str(path), env={})

        assert "parse" in str(exc_info.value).lower()

    def test_non_mapping_top_level(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            load_config_file(str(path), env={})

    def test_non_mapping_section(self, config_file):
        path = config_file({"syncret": ["not", "a", "mapping"]})

        with pytest.raises(ConfigError):
            load_config_file(str(path), env={})
