"""E2E tests: real websockets server and MCPClient on an ephemeral port."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
import websockets

from cendoj_mcp.app import build_server
from cendoj_mcp.protocols.errors import ConnectionClosedError, ConnectionError, RpcError
from cendoj_mcp.protocols.mcp.client import MCPClient


def _port(ws_server: Any) -> int:
    return next(iter(ws_server.sockets)).getsockname()[1]


class TestRoundTrip:
    async def test_full_session(self) -> None:
        server = build_server()
        async with server.listen("127.0.0.1", 0) as ws_server:
            url = f"ws://127.0.0.1:{_port(ws_server)}/mcp"
            async with MCPClient(url) as client:
                init = await client.initialize()
                tools = await client.list_tools()
                found = await client.call_tool("get_sentence", {"id": 2})
                missing = await client.call_tool("get_sentence", {"id": 999})

                assert client.server_hello is not None
                assert client.server_hello["serverInfo"]["name"] == "cendoj-mcp-server"

        assert init["serverInfo"]["name"] == "cendoj-mcp-server"
        assert "get_sentence" in [t.name for t in tools]
        assert found == server.registry.call("get_sentence", {"id": 2})
        assert found["data"]["juez"] == "María López"
        assert missing == {"error": "Sentencia 999 no encontrada"}

    async def test_concurrent_calls_are_correlated(self) -> None:
        server = build_server()
        async with server.listen("127.0.0.1", 0) as ws_server:
            url = f"ws://127.0.0.1:{_port(ws_server)}/mcp"
            async with MCPClient(url) as client:
                results = await asyncio.gather(
                    *(client.call_tool("get_sentence", {"id": i}) for i in (3, 1, 2, 1, 3))
                )

        assert [r["data"]["id"] for r in results] == [3, 1, 2, 1, 3]

    async def test_unknown_method_raises_rpc_error(self) -> None:
        server = build_server()
        async with server.listen("127.0.0.1", 0) as ws_server:
            url = f"ws://127.0.0.1:{_port(ws_server)}/mcp"
            async with MCPClient(url) as client:
                with pytest.raises(RpcError) as exc_info:
                    await client.call("foo/bar")
                # the connection survives the error
                listed = await client.call("tools/list")

        assert exc_info.value.code == -32601
        assert listed["tools"]

    async def test_raw_garbage_gets_parse_error(self) -> None:
        server = build_server()
        async with server.listen("127.0.0.1", 0) as ws_server:
            url = f"ws://127.0.0.1:{_port(ws_server)}/mcp"
            async with websockets.connect(url) as ws:
                handshake = await ws.recv()
                await ws.send("{not json")
                reply = await ws.recv()

        assert '"id": 0' in handshake
        assert '"code": -32700' in reply
        assert '"id": null' in reply


class TestFailures:
    async def test_wrong_path_fails_to_connect(self) -> None:
        server = build_server()
        async with server.listen("127.0.0.1", 0) as ws_server:
            client = MCPClient(f"ws://127.0.0.1:{_port(ws_server)}/elsewhere")
            with pytest.raises(ConnectionError):
                await client.connect()

    async def test_nothing_listening_fails_to_connect(self) -> None:
        async with websockets.serve(lambda ws: None, "127.0.0.1", 0) as probe:
            port = _port(probe)
        client = MCPClient(f"ws://127.0.0.1:{port}/mcp")
        with pytest.raises(ConnectionError):
            await client.connect()

    async def test_server_drop_rejects_pending_call(self) -> None:
        async def drop_after_first_message(ws: Any) -> None:
            await ws.recv()
            await ws.close()

        async with websockets.serve(drop_after_first_message, "127.0.0.1", 0) as ws_server:
            client = MCPClient(f"ws://127.0.0.1:{_port(ws_server)}/")
            await client.connect()
            with pytest.raises(ConnectionClosedError):
                await asyncio.wait_for(client.call("tools/list"), 5)
            assert client.pending_count == 0
            await client.close()

    async def test_health_check(self) -> None:
        server = build_server()
        async with server.listen("127.0.0.1", 0) as ws_server:
            reader, writer = await asyncio.open_connection("127.0.0.1", _port(ws_server))
            writer.write(b"GET /health HTTP/1.1\r\nHost: localhost\r\n\r\n")
            await writer.drain()
            data = await asyncio.wait_for(reader.read(), 5)
            writer.close()

        assert data.startswith(b"HTTP/1.1 200")
        assert b'"status": "OK"' in data
