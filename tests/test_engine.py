"""
Tests for the Hive-Engine query client.
"""

import json
import httpx
import pytest

from shared.models import TokenInfo
from client.engine import EngineAPIError, EngineClient


SWAP_HIVE = {
    "_id": 8,
    "issuer": "honey-swap",
    "symbol": "SWAP.HIVE",
    "name": "HIVE Pegged",
    "metadata": "{\"url\":\"https://hive-engine.com\"}",
    "precision": 8,
    "maxSupply": "9007199254740991.00000000",
    "supply": "1000.00000000",
    "circulatingSupply": "900.00000000",
    "stakingEnabled": False,
    "unstakingCooldown": 1,
    "delegationEnabled": False,
    "undelegationCooldown": 0,
}


def rpc_result(result):
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})


class TestEngineClient:
    """Tests for EngineClient."""

    @pytest.mark.asyncio
    async def test_get_token(self):
        """Test a token lookup posts a find call to /contracts."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.url.path, json.loads(request.content)))
            return rpc_result([SWAP_HIVE])

        async with EngineClient(
            "https://engine.a/",
            transport=httpx.MockTransport(handler)
        ) as engine:
            token = await engine.get_token("swap.hive")

        assert isinstance(token, TokenInfo)
        assert token.symbol == "SWAP.HIVE"
        assert token.max_supply == "9007199254740991.00000000"
        assert token.precision == 8

        path, body = seen[0]
        assert path == "/contracts"
        assert body["method"] == "find"
        assert body["params"]["contract"] == "tokens"
        assert body["params"]["table"] == "tokens"
        assert body["params"]["query"] == {"symbol": "SWAP.HIVE"}
        assert body["params"]["limit"] == 1

    @pytest.mark.asyncio
    async def test_token_not_found(self):
        transport = httpx.MockTransport(lambda request: rpc_result([]))

        async with EngineClient("https://engine.a", transport=transport) as engine:
            assert await engine.get_token("NOPE") is None

    @pytest.mark.asyncio
    async def test_find_null_result(self):
        """Test a null result is treated as no rows."""
        transport = httpx.MockTransport(lambda request: rpc_result(None))

        async with EngineClient("https://engine.a", transport=transport) as engine:
            assert await engine.find("tokens", "balances", {"account": "x"}) == []

    @pytest.mark.asyncio
    async def test_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))

        async with EngineClient("https://engine.a", transport=transport) as engine:
            with pytest.raises(EngineAPIError) as exc_info:
                await engine.find("tokens", "tokens")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_rpc_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32601, "message": "Method not found"},
        }))

        async with EngineClient("https://engine.a", transport=transport) as engine:
            with pytest.raises(EngineAPIError, match="Method not found"):
                await engine.find_one("tokens", "tokens")
