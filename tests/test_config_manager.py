"""Configuration loading and saving tests."""

import pytest

from gdrive_mirror.exceptions import ConfigurationError
from gdrive_mirror.models.config import MirrorConfig
from gdrive_mirror.storage.config_manager import ConfigManager


def test_missing_file_gives_defaults(tmp_path) -> None:
    config = ConfigManager(tmp_path / "config.ini").load_config()

    assert config.max_workers == 10
    assert config.credentials_file == "~/.credentials.json"
    assert config.token_file == "token.json"
    assert config.output_dir == "."
    assert config.config_path == str(tmp_path)


def test_file_values_are_loaded(tmp_path) -> None:
    config_file = tmp_path / "config.ini"
    config_file.write_text(
        "[DEFAULT]\nmax_workers = 4\noutput_dir = mirror\nrequest_timeout = 12.5\n"
    )

    config = ConfigManager(config_file).load_config()

    assert config.max_workers == 4
    assert config.output_dir == "mirror"
    assert config.request_timeout == 12.5


def test_cli_options_override_file_and_none_is_ignored(tmp_path) -> None:
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\nmax_workers = 4\noutput_dir = mirror\n")

    config = ConfigManager(config_file).load_config(
        {"max_workers": 16, "output_dir": None}
    )

    assert config.max_workers == 16
    assert config.output_dir == "mirror"


@pytest.mark.parametrize("workers", [0, 65, -1])
def test_out_of_range_workers_are_rejected(tmp_path, workers) -> None:
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path / "config.ini").load_config({"max_workers": workers})


def test_non_numeric_value_is_rejected(tmp_path) -> None:
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\nmax_workers = many\n")

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_unparseable_file_is_rejected(tmp_path) -> None:
    config_file = tmp_path / "config.ini"
    config_file.write_text("max_workers = 4\n")

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_save_new_config_round_trips(tmp_path) -> None:
    config_file = tmp_path / "nested" / "config.ini"
    manager = ConfigManager(config_file)

    manager.save_new_config({"max_workers": 3, "credentials_file": "/etc/creds.json"})

    loaded = ConfigManager(config_file).load_config()
    assert loaded.max_workers == 3
    assert loaded.credentials_file == "/etc/creds.json"
    assert loaded.token_file == "token.json"
    assert set(MirrorConfig.get_ini_keys()) <= set(
        line.split(" = ")[0] for line in config_file.read_text().splitlines() if " = " in line
    )


def test_save_new_config_validates(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        ConfigManager(tmp_path / "config.ini").save_new_config({"max_workers": 0})
