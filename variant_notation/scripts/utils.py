#!/usr/bin/env python3
# variant_notation/scripts/utils.py

import functools
import importlib.resources as pkg_resources
import json
import logging
import os

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def load_config(config_path=None):
    """
    Load the configuration file with fallback to the default package config.

    Args:
        config_path (str or None): Path to the user-provided config file.

    Returns:
        dict: The loaded configuration dictionary.

    Raises:
        json.JSONDecodeError: If the user config file is not valid JSON.
        FileNotFoundError: If the default config is missing from the package data.
    """
    if config_path is not None and os.path.exists(config_path):
        # User provided a config path
        try:
            with open(config_path) as config_file:
                config = json.load(config_file)
                logging.info(f"Configuration loaded from {config_path}")
                return config
        except json.JSONDecodeError as e:
            logging.error(f"Error decoding JSON from the config file: {e}")
            raise
    else:
        # No config path provided or file does not exist; use default config from package data
        try:
            with pkg_resources.open_text("variant_notation", "config.json") as f:
                config = json.load(f)
                logging.debug("Loaded default config from package data.")
                return config
        except FileNotFoundError:
            logging.error("Error: Default config file not found in package data.")
            raise


@functools.lru_cache(maxsize=None)
def get_parser_settings():
    """
    Parser section of the packaged default config, loaded once.

    Returns:
        dict: min_variant_length, min_continuous_length and min_multi_feature_length.
    """
    return load_config()["parser"]


def setup_logging(log_level=logging.INFO, log_file=None, config=None):
    """
    Sets up logging for the application.

    Args:
        log_level (int): Logging level (e.g., logging.INFO).
        log_file (str, optional): Path to a log file. If None, logs are printed to console.
        config (dict, optional): Configuration whose logging.format is used for
            the records. Defaults to the packaged config.
    """
    if config is None:
        config = load_config()
    log_format = config.get("logging", {}).get("format", DEFAULT_LOG_FORMAT)

    logger = logging.getLogger()  # Get the root logger
    logger.setLevel(log_level)

    # Clear existing handlers so we don't duplicate logs
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
