"""
FlowerEngine Hive Account Lookup

Resolves Hive account records over JSON-RPC, falling back across public API nodes.
"""

from typing import Optional
import httpx
import structlog

from shared.models import AccountRecord
from shared.protocol import RPCResponse, get_accounts_request
from .config import DEFAULT_HIVE_NODES, DEFAULT_TIMEOUT

logger = structlog.get_logger()


class HiveRPCError(Exception):
    """Raised when no Hive API node could answer a call."""

    def __init__(self, message: str, failures: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.failures = failures or {}


class HiveAccountLookup:
    """
    Async Hive account lookup.

    Each call tries the configured API nodes in order and stops at the
    first one that answers. Nodes are not retried.

    Usage:
        async with HiveAccountLookup() as lookup:
            account = await lookup.lookup("flowerengine")
    """

    def __init__(
        self,
        endpoints: Optional[list[str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.endpoints = list(DEFAULT_HIVE_NODES if endpoints is None else endpoints)
        if not self.endpoints:
            raise ValueError("At least one Hive API node is required")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HiveAccountLookup":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        self._client = httpx.AsyncClient(
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
        """Get the HTTP client."""
        if not self._client:
            raise RuntimeError("Lookup not connected. Call connect() first.")
        return self._client

    async def _call(self, endpoint: str, body: dict) -> RPCResponse:
        response = await self.client.post(endpoint, json=body)
        response.raise_for_status()
        return RPCResponse.model_validate(response.json())

    async def call(self, body: dict) -> object:
        """
        Send a JSON-RPC call to the first API node that answers.

        Args:
            body: JSON-RPC request body

        Returns:
            The `result` member of the response

        Raises:
            HiveRPCError: If every node failed
        """
        failures: dict[str, str] = {}

        for endpoint in self.endpoints:
            try:
                rpc = await self._call(endpoint, body)
            except (httpx.HTTPError, ValueError) as e:
                failures[endpoint] = str(e) or type(e).__name__
                logger.warning("hive_node_failed", endpoint=endpoint, error=failures[endpoint])
                continue

            if rpc.is_error:
                failures[endpoint] = rpc.error.message
                logger.warning("hive_node_rpc_error", endpoint=endpoint, error=rpc.error.message)
                continue

            return rpc.result

        raise HiveRPCError(
            f"All Hive API nodes failed for {body.get('method')}",
            failures
        )

    async def lookup(self, account_name: str) -> Optional[AccountRecord]:
        """
        Get an account record by name.

        Args:
            account_name: Hive account name

        Returns:
            The account record, or None if the account does not exist
        """
        request = get_accounts_request([account_name])
        result = await self.call(request.to_json())

        if not result:
            return None

        return AccountRecord.model_validate(result[0])
