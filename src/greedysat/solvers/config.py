"""
Configuration management for greedysat solvers.
Uses OmegaConf for flexible configuration handling.
"""

import logging
import os
from typing import Any

import omegaconf
from omegaconf import DictConfig, OmegaConf

from greedysat.utils.exceptions import ConfigurationError

# Set up logging
logger = logging.getLogger(__name__)


INITIALIZATIONS = ("random", "unassigned")
EVENT_FORMATS = ("json", "csv")


class SolverConfig:
    """
    Configuration manager for greedysat.
    Handles loading, merging, and accessing configuration parameters.
    """

    DEFAULT_CONFIG = {
        "solver": {
            "name": "greedy",
            "seed": 0,
            "initialization": "random",
            "max_iterations": None,
            "timeout": None,
        },
        "logging": {
            "level": "INFO",
            "file": None,
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
        "events": {
            "dir": None,
            "format": "json",
        },
        "benchmark": {
            "num_variables": 20,
            "clause_ratio": 4.26,
            "clause_size": 3,
            "instances": 5,
            "seeds": 3,
            "max_iterations": 10000,
        },
    }

    def __init__(self, config_path: str | None = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to a YAML configuration file

        Raises:
            ConfigurationError: If the file is missing or cannot be read
        """
        self.config: DictConfig = OmegaConf.create(self.DEFAULT_CONFIG)

        if config_path:
            self._load_config_file(config_path)

    def _load_config_file(self, config_path: str) -> None:
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            file_config = OmegaConf.load(config_path)
        except Exception as e:
            raise ConfigurationError(
                f"Error loading configuration file {config_path}: {e}"
            ) from e

        self.config = OmegaConf.merge(self.config, file_config)
        logger.debug(f"Loaded configuration from {config_path}")

    def update(self, config_dict: dict[str, Any]) -> None:
        """
        Update the configuration with the given dictionary.

        Args:
            config_dict: Nested dictionary to merge into the configuration
        """
        self.config = OmegaConf.merge(self.config, config_dict)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.
        Supports dot notation for nested keys (e.g., "solver.seed").

        Args:
            key: Configuration key
            default: Default value if key not found or null

        Returns:
            Configuration value
        """
        try:
            value = OmegaConf.select(self.config, key)
        except (omegaconf.errors.OmegaConfBaseException, KeyError):
            return default
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by key.
        Supports dot notation for nested keys (e.g., "solver.timeout").
        """
        OmegaConf.update(self.config, key, value, merge=True)

    def to_dict(self) -> dict[str, Any]:
        return OmegaConf.to_container(self.config, resolve=True)

    def to_yaml(self) -> str:
        return OmegaConf.to_yaml(self.config)

    def save(self, file_path: str) -> None:
        """
        Save the configuration to a YAML file.

        Args:
            file_path: Path to save the configuration to
        """
        os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
        OmegaConf.save(self.config, file_path)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def validate_initialization(initialization: str) -> str:
    """Check that ``initialization`` names a supported start state."""
    if initialization not in INITIALIZATIONS:
        raise ConfigurationError(
            f"Unknown initialization '{initialization}', expected one of "
            f"{', '.join(INITIALIZATIONS)}",
            key="solver.initialization",
        )
    return initialization


def validate_events_format(format_type: str) -> str:
    if format_type not in EVENT_FORMATS:
        raise ConfigurationError(
            f"Unknown event format '{format_type}', expected one of "
            f"{', '.join(EVENT_FORMATS)}",
            key="events.format",
        )
    return format_type


# Create a global configuration instance
config = SolverConfig()


def load_config(config_path: str | None = None) -> SolverConfig:
    """
    Load configuration from a file and make it the global configuration.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration instance
    """
    global config
    if config_path:
        config = SolverConfig(config_path)
    return config


def reset_config() -> SolverConfig:
    """Restore the global configuration to its defaults."""
    global config
    config = SolverConfig()
    return config


def get_config() -> SolverConfig:
    """
    Get the global configuration instance.

    Returns:
        Configuration instance
    """
    return config
