import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from hashfile.config.loader import find_config_file, load_config, load_config_from_file
from hashfile.config.models import HashfileConfig, OutputMode


def test_defaults():
    config = HashfileConfig()

    assert config.encoding == "utf-8"
    assert config.limits.max_file_size == 10 * 1024 * 1024
    assert config.limits.max_operations == 100
    assert config.output.mode == OutputMode.HUMAN
    assert config.paths.cwd == os.getcwd()
    assert config.paths.enforce_roots is True
    assert config.logging.level == "WARNING"
    # No roots configured: the working directory is the only root
    assert config.root_entries() == [os.getcwd()]


def test_log_level_is_normalized():
    assert HashfileConfig(logging={"level": "debug"}).logging.level == "DEBUG"
    with pytest.raises(ValidationError):
        HashfileConfig(logging={"level": "chatty"})


def test_load_config_from_toml(tmp_path):
    config_file = tmp_path / "hashfile.toml"
    config_file.write_text(
        """
[hashfile]
encoding = "latin-1"

[limits]
max_operations = 5

[paths]
cwd = "%s"
roots = ["/srv/a", "file:///srv/b"]

[output]
mode = "json"

[logging]
level = "info"
"""
        % tmp_path
    )

    config = load_config(config_file)

    assert config.encoding == "latin-1"
    assert config.limits.max_operations == 5
    assert config.paths.cwd == str(tmp_path.resolve())
    assert config.root_entries() == ["/srv/a", "file:///srv/b"]
    assert config.output.mode == OutputMode.JSON
    assert config.logging.level == "INFO"
    assert load_config_from_file(config_file) == config


def test_overrides_win_over_file(tmp_path):
    config_file = tmp_path / "hashfile.toml"
    config_file.write_text('[paths]\nroots = ["/srv/a"]\n')

    config = load_config(
        config_file,
        {"paths.roots": ["/srv/b"], "output.mode": OutputMode.JSON, "encoding": "ascii"},
    )

    assert config.paths.roots == ["/srv/b"]
    assert config.output.mode == OutputMode.JSON
    assert config.encoding == "ascii"


def test_load_config_without_file():
    assert load_config(None) == HashfileConfig()


def test_load_config_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_from_file(tmp_path / "nope.toml")


def test_find_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))

    assert find_config_file() is None

    (tmp_path / ".hashfile.toml").write_text("")
    assert find_config_file() == Path.cwd() / ".hashfile.toml"

    (tmp_path / "hashfile.toml").write_text("")
    assert find_config_file() == Path.cwd() / "hashfile.toml"
