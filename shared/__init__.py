"""
FlowerEngine Shared Module

Data models, JSON-RPC envelopes and logging setup shared by the node selector and the client.
"""

from .models import (
    NodeBenchmark,
    NodeConfig,
    NodeLatency,
    NodeReport,
    ReportParameters,
    WeightedScoring,
    NodeMetadataDocument,
    AccountRecord,
    TokenInfo,
    NoNodeReason,
    NodeSelection,
    NodeListing,
)
from .protocol import (
    RPCError,
    RPCRequest,
    RPCResponse,
    get_accounts_request,
    find_request,
)
from .logging_config import configure_logging

__all__ = [
    # Models
    "NodeBenchmark",
    "NodeConfig",
    "NodeLatency",
    "NodeReport",
    "ReportParameters",
    "WeightedScoring",
    "NodeMetadataDocument",
    "AccountRecord",
    "TokenInfo",
    "NoNodeReason",
    "NodeSelection",
    "NodeListing",
    # Protocol
    "RPCError",
    "RPCRequest",
    "RPCResponse",
    "get_accounts_request",
    "find_request",
    # Logging
    "configure_logging",
]
