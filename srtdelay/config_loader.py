"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "srtdelay.yaml"

DEFAULT_CONFIG = {
    'encoding': 'utf-8',
    'extension': '.srt',
    'show_progress': True,
    'log_dir': 'logs',
    'log_file': 'srtdelay.log',
    'log_to_file': False,
}

class ConfigLoader:
    """Loads configuration settings from a YAML file, layered over DEFAULT_CONFIG."""

    def load_config(self, config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file.
            required: If False, a missing file yields the defaults instead of an error.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If a required configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        config = dict(DEFAULT_CONFIG)
        if not os.path.exists(config_path):
            if required:
                logger.error(f"Configuration file not found at path: {config_path}")
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            logger.debug(f"No configuration file at {config_path}; using defaults.")
            return config
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        logger.info(f"Attempting to load configuration from: {config_path}")
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if loaded is None:
            # Empty file
            return config
        if not isinstance(loaded, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        for key, value in loaded.items():
            if key not in DEFAULT_CONFIG:
                logger.warning(f"Ignoring unknown configuration key '{key}' in {config_path}")
                continue
            config[key] = value

        extension = config['extension']
        if not isinstance(extension, str) or not extension.startswith('.'):
            raise ConfigurationError(f"'extension' must be a string starting with '.', got {extension!r}")

        logger.info(f"Configuration loaded successfully from {config_path}")
        return config
