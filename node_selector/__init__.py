"""
FlowerEngine Node Selector

Fetches the Hive-Engine node list published on a Hive account and picks a node to use.
"""

from .errors import (
    MetadataError,
    AccountNotFoundError,
    EmptyMetadataError,
    AccountLookupError,
    MalformedMetadataError,
    InvalidMetadataShapeError,
)
from .metadata import AccountLookup, fetch_metadata, parse_metadata
from .policies import (
    available_nodes,
    list_active_and_failing,
    find_report,
    is_candidate,
    select_best_available,
    select_best_overall,
)
from .service import NodeService, DEFAULT_ACCOUNT

__all__ = [
    # Errors
    "MetadataError",
    "AccountNotFoundError",
    "EmptyMetadataError",
    "AccountLookupError",
    "MalformedMetadataError",
    "InvalidMetadataShapeError",
    # Fetcher
    "AccountLookup",
    "fetch_metadata",
    "parse_metadata",
    # Policies
    "available_nodes",
    "list_active_and_failing",
    "find_report",
    "is_candidate",
    "select_best_available",
    "select_best_overall",
    # Service
    "NodeService",
    "DEFAULT_ACCOUNT",
]
