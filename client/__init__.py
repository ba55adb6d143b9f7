"""
FlowerEngine Client

Hive account lookup, Hive-Engine query client and CLI.
"""

from .config import ClientConfig, ConfigError, load_config
from .hive import HiveAccountLookup, HiveRPCError
from .engine import EngineClient, EngineAPIError

__all__ = [
    "ClientConfig",
    "ConfigError",
    "load_config",
    "HiveAccountLookup",
    "HiveRPCError",
    "EngineClient",
    "EngineAPIError",
]
__version__ = "0.1.0"
