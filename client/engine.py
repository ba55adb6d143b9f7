"""
FlowerEngine Hive-Engine Client

Minimal client for querying contract tables on a Hive-Engine node.
"""

from typing import Optional
import httpx

from shared.models import TokenInfo
from shared.protocol import RPCResponse, find_request
from .config import DEFAULT_TIMEOUT


class EngineAPIError(Exception):
    """Raised when a Hive-Engine node returns an error."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class EngineClient:
    """
    Async client for a single Hive-Engine node.

    Usage:
        async with EngineClient("https://engine.rishipanthee.com") as engine:
            token = await engine.get_token("SWAP.HIVE")
    """

    def __init__(
        self,
        node_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.node_url = node_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "EngineClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self.node_url,
            timeout=self.timeout,
            transport=self._transport
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not connected. Call connect() first.")
        return self._client

    async def find(
        self,
        contract: str,
        table: str,
        query: Optional[dict] = None,
        limit: int = 1000,
        offset: int = 0
    ) -> list[dict]:
        """
        Query rows of a contract table.

        Args:
            contract: Contract name (e.g. "tokens")
            table: Table name (e.g. "balances")
            query: MongoDB-style filter
            limit: Maximum rows to return
            offset: Rows to skip

        Returns:
            Matching rows

        Raises:
            EngineAPIError: If the node answers with an error
        """
        request = find_request(contract, table, query or {}, limit=limit, offset=offset)
        response = await self.client.post("/contracts", json=request.to_json())

        if response.status_code >= 400:
            raise EngineAPIError(response.text, response.status_code)

        rpc = RPCResponse.model_validate(response.json())
        if rpc.is_error:
            raise EngineAPIError(rpc.error.message, response.status_code)

        return rpc.result or []

    async def find_one(
        self,
        contract: str,
        table: str,
        query: Optional[dict] = None
    ) -> Optional[dict]:
        """Return the first matching row, or None."""
        rows = await self.find(contract, table, query, limit=1)
        return rows[0] if rows else None

    async def get_token(self, symbol: str) -> Optional[TokenInfo]:
        """Get a token definition by symbol."""
        row = await self.find_one("tokens", "tokens", {"symbol": symbol.upper()})
        if row is None:
            return None
        return TokenInfo.model_validate(row)
