"""
Tests for the Hive account lookup.
"""

import json
import httpx
import pytest

from shared.models import AccountRecord
from client.hive import HiveAccountLookup, HiveRPCError
from node_selector import NodeService


ACCOUNT_ROW = {
    "id": 1234,
    "name": "flowerengine",
    "json_metadata": json.dumps({
        "nodes": ["https://engine.a"],
        "failing_nodes": {},
        "report": [{"node": "https://engine.a", "engine": True, "weighted_score": 80}],
    }),
    "posting_json_metadata": "",
    "balance": "1.000 HIVE",
}


def rpc_result(result, request_id=1):
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": request_id, "result": result})


class TestHiveAccountLookup:
    """Tests for HiveAccountLookup."""

    @pytest.fixture
    def calls(self):
        """Record of requests seen by the mock transport."""
        return []

    @pytest.mark.asyncio
    async def test_lookup_account(self, calls):
        """Test an account record is returned from get_accounts."""
        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(json.loads(request.content))
            return rpc_result([ACCOUNT_ROW])

        async with HiveAccountLookup(
            endpoints=["https://api.one"],
            transport=httpx.MockTransport(handler)
        ) as lookup:
            account = await lookup.lookup("flowerengine")

        assert isinstance(account, AccountRecord)
        assert account.name == "flowerengine"
        assert account.json_metadata == ACCOUNT_ROW["json_metadata"]
        assert calls[0]["method"] == "condenser_api.get_accounts"
        assert calls[0]["params"] == [["flowerengine"]]
        assert calls[0]["jsonrpc"] == "2.0"

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        """Test an empty result means the account does not exist."""
        transport = httpx.MockTransport(lambda request: rpc_result([]))

        async with HiveAccountLookup(endpoints=["https://api.one"], transport=transport) as lookup:
            assert await lookup.lookup("ghost") is None

    @pytest.mark.asyncio
    async def test_falls_back_to_next_endpoint(self, calls):
        """Test a failing API node is skipped."""
        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.host)
            if request.url.host == "api.one":
                return httpx.Response(502, text="Bad Gateway")
            if request.url.host == "api.two":
                raise httpx.ConnectError("connection refused", request=request)
            return rpc_result([ACCOUNT_ROW])

        async with HiveAccountLookup(
            endpoints=["https://api.one", "https://api.two", "https://api.three"],
            transport=httpx.MockTransport(handler)
        ) as lookup:
            account = await lookup.lookup("flowerengine")

        assert account.name == "flowerengine"
        assert calls == ["api.one", "api.two", "api.three"]

    @pytest.mark.asyncio
    async def test_rpc_error_falls_back(self):
        """Test a JSON-RPC error moves on to the next node."""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.one":
                return httpx.Response(200, json={
                    "jsonrpc": "2.0",
                    "id": 1,
                    "error": {"code": -32603, "message": "Internal Error"},
                })
            return rpc_result([ACCOUNT_ROW])

        async with HiveAccountLookup(
            endpoints=["https://api.one", "https://api.two"],
            transport=httpx.MockTransport(handler)
        ) as lookup:
            account = await lookup.lookup("flowerengine")

        assert account is not None

    @pytest.mark.asyncio
    async def test_all_endpoints_fail(self):
        """Test HiveRPCError lists every failed node."""
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="down"))

        async with HiveAccountLookup(
            endpoints=["https://api.one", "https://api.two"],
            transport=transport
        ) as lookup:
            with pytest.raises(HiveRPCError) as exc_info:
                await lookup.lookup("flowerengine")

        assert set(exc_info.value.failures) == {"https://api.one", "https://api.two"}

    @pytest.mark.asyncio
    async def test_invalid_json_response_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.one":
                return httpx.Response(200, text="<html>maintenance</html>")
            return rpc_result([ACCOUNT_ROW])

        async with HiveAccountLookup(
            endpoints=["https://api.one", "https://api.two"],
            transport=httpx.MockTransport(handler)
        ) as lookup:
            account = await lookup.lookup("flowerengine")

        assert account.name == "flowerengine"

    def test_requires_endpoint(self):
        with pytest.raises(ValueError):
            HiveAccountLookup(endpoints=[])

    @pytest.mark.asyncio
    async def test_not_connected(self):
        lookup = HiveAccountLookup()

        with pytest.raises(RuntimeError):
            await lookup.lookup("flowerengine")

    @pytest.mark.asyncio
    async def test_with_node_service(self):
        """Test the lookup plugs into NodeService."""
        transport = httpx.MockTransport(lambda request: rpc_result([ACCOUNT_ROW]))

        async with HiveAccountLookup(endpoints=["https://api.one"], transport=transport) as lookup:
            best = await NodeService(lookup).get_best_node("flowerengine")

        assert best == "https://engine.a"
