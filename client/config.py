"""
FlowerEngine Client Configuration

Settings for the command line client, read from a YAML file and the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_ACCOUNT = "flowerengine"
DEFAULT_HIVE_NODES = [
    "https://api.hive.blog",
    "https://api.deathwing.me",
    "https://api.openhive.network",
]
DEFAULT_TIMEOUT = 30.0
CONFIG_DIR_NAME = ".flowerengine"


class ConfigError(Exception):
    """Raised when the configuration file cannot be used."""
    pass


@dataclass
class ClientConfig:
    """Client configuration."""
    account: str = DEFAULT_ACCOUNT
    hive_nodes: list[str] = field(default_factory=lambda: list(DEFAULT_HIVE_NODES))
    timeout: float = DEFAULT_TIMEOUT
    config_dir: Path = field(default_factory=lambda: Path.home() / CONFIG_DIR_NAME)

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config.yaml"


def _split_nodes(value: str) -> list[str]:
    return [node.strip() for node in value.split(",") if node.strip()]


def load_config(config_path: Optional[Path] = None) -> ClientConfig:
    """
    Build the client configuration.

    Values come from the YAML file first (an explicit path, or
    ~/.flowerengine/config.yaml when it exists), then from the
    FLOWERENGINE_ACCOUNT, HIVE_NODES and FLOWERENGINE_TIMEOUT
    environment variables.

    Args:
        config_path: Explicit YAML file; must exist when given

    Returns:
        The merged configuration

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping
    """
    config = ClientConfig()

    path = config_path or config.config_file
    if config_path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        if "account" in data:
            config.account = str(data["account"])
        if "hive_nodes" in data:
            nodes = data["hive_nodes"]
            if isinstance(nodes, str):
                config.hive_nodes = _split_nodes(nodes)
            elif isinstance(nodes, list):
                config.hive_nodes = [str(n) for n in nodes]
            else:
                raise ConfigError(f"hive_nodes in {path} must be a list or a comma-separated string")
        if "timeout" in data:
            try:
                config.timeout = float(data["timeout"])
            except (TypeError, ValueError) as e:
                raise ConfigError(f"timeout in {path} must be a number, got {data['timeout']!r}") from e

    # Environment overrides
    account = os.environ.get("FLOWERENGINE_ACCOUNT")
    if account:
        config.account = account

    hive_nodes = os.environ.get("HIVE_NODES")
    if hive_nodes:
        config.hive_nodes = _split_nodes(hive_nodes)

    timeout = os.environ.get("FLOWERENGINE_TIMEOUT")
    if timeout:
        try:
            config.timeout = float(timeout)
        except ValueError as e:
            raise ConfigError(f"FLOWERENGINE_TIMEOUT must be a number, got {timeout!r}") from e

    return config
