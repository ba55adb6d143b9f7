"""
FlowerEngine JSON-RPC Protocol

Request and response envelopes for the Hive and Hive-Engine JSON-RPC APIs.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class RPCError(BaseModel):
    """Error object of a JSON-RPC response."""
    model_config = ConfigDict(extra="allow")

    code: Optional[int] = None
    message: str = ""
    data: Any = None


class RPCRequest(BaseModel):
    """A JSON-RPC 2.0 request."""
    jsonrpc: str = "2.0"
    id: int = 1
    method: str
    params: Any = None

    def to_json(self) -> dict:
        """Body to send, without unset params."""
        return self.model_dump(exclude_none=True)


class RPCResponse(BaseModel):
    """A JSON-RPC 2.0 response."""
    model_config = ConfigDict(extra="allow")

    jsonrpc: Optional[str] = None
    id: Optional[int] = None
    result: Any = None
    error: Optional[RPCError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def get_accounts_request(account_names: list[str]) -> RPCRequest:
    """Build a condenser_api.get_accounts call."""
    return RPCRequest(method="condenser_api.get_accounts", params=[account_names])


def find_request(
    contract: str,
    table: str,
    query: dict,
    limit: int = 1000,
    offset: int = 0
) -> RPCRequest:
    """Build a Hive-Engine contracts `find` call."""
    return RPCRequest(
        method="find",
        params={
            "contract": contract,
            "table": table,
            "query": query,
            "limit": limit,
            "offset": offset,
        }
    )
