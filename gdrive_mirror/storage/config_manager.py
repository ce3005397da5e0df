"""
Manages loading, validation, and creation of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gdrive_mirror.exceptions import ConfigurationError
from gdrive_mirror.models.config import MirrorConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> MirrorConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        A missing file is not an error: every setting has a default.

        Args:
            cli_options: A dictionary of options provided via the command line.
            `None` values are ignored.

        Returns:
            A validated MirrorConfig object.

        Raises:
            ConfigurationError: If the config file cannot be parsed or validation
            fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(f"Error parsing configuration file: {e}") from e
            config_from_file = self._get_config_as_dict()
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults."
            )

        if cli_options:
            config_from_file.update(
                {key: value for key, value in cli_options.items() if value is not None}
            )

        try:
            return MirrorConfig(
                **config_from_file, config_path=str(self.config_file_path.parent)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save. Missing keys get defaults.
        """
        try:
            validated = MirrorConfig(
                **{k: v for k, v in settings.items() if v is not None}
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {
            key: str(getattr(validated, key)) for key in sorted(MirrorConfig.get_ini_keys())
        }

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        known_keys = MirrorConfig.get_ini_keys()
        for key in section:
            if key not in known_keys:
                log.warning(f"[yellow]Ignoring unknown configuration key '{key}'.[/yellow]")
        try:
            values = {
                "credentials_file": section.get("credentials_file"),
                "token_file": section.get("token_file"),
                "output_dir": section.get("output_dir"),
                "max_workers": section.getint("max_workers"),
                "request_timeout": section.getfloat("request_timeout"),
            }
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e
        return {key: value for key, value in values.items() if value is not None}
