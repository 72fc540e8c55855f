"""Tests for the PostgREST gateway."""

import asyncio
import json

import httpx
import pytest

from volunteer_board.adapters.rest_gateway import (
    HttpxRestGateway,
    eq_filter,
    select_query,
)
from volunteer_board.errors import DecodeError, NetworkError, RemoteError


def _gateway(handler) -> HttpxRestGateway:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxRestGateway(
        base_url="https://example.supabase.co",
        api_key="anon-key",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_select_sends_query_and_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}])

    gateway = _gateway(handler)

    rows = asyncio.run(
        gateway.select("records", select_query(order="created_at", desc=True))
    )

    assert rows == [{"id": 1}]
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/records"
    assert request.url.params["select"] == "*"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"


def test_insert_update_delete_map_to_http_verbs() -> None:
    seen: list[tuple[str, str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, str(request.url), request.content))
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(201, json=[{"id": 7, "name": "Soup"}])

    gateway = _gateway(handler)

    inserted = asyncio.run(gateway.insert("records", {"name": "Soup"}))
    asyncio.run(gateway.update("records", {"name": "Soup 2"}, eq_filter("id", 7)))
    deleted = asyncio.run(gateway.delete("comments", eq_filter("record_id", 7)))

    assert inserted == [{"id": 7, "name": "Soup"}]
    assert deleted == []
    methods = [method for method, _, _ in seen]
    assert methods == ["POST", "PATCH", "DELETE"]
    assert seen[1][1].endswith("/rest/v1/records?id=eq.7")
    assert json.loads(seen[1][2]) == {"name": "Soup 2"}
    assert seen[2][1].endswith("/rest/v1/comments?record_id=eq.7")


def test_non_success_status_raises_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text='{"message":"Invalid API key"}')

    gateway = _gateway(handler)

    with pytest.raises(RemoteError) as excinfo:
        asyncio.run(gateway.select("records"))

    assert excinfo.value.status_code == 401
    assert "Invalid API key" in excinfo.value.body


def test_malformed_body_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    gateway = _gateway(handler)

    with pytest.raises(DecodeError) as excinfo:
        asyncio.run(gateway.select("records"))

    assert excinfo.value.body == "<html>oops</html>"


def test_scalar_json_body_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="42")

    with pytest.raises(DecodeError):
        asyncio.run(_gateway(handler).select("records"))


def test_object_body_is_wrapped_in_a_list() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": 3})

    rows = asyncio.run(_gateway(handler).insert("comments", {"content": "hi"}))

    assert rows == [{"id": 3}]


def test_transport_failure_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        asyncio.run(_gateway(handler).select("records"))


def test_query_helpers() -> None:
    assert select_query() == "select=*"
    assert select_query(order="created_at") == "select=*&order=created_at.asc"
    assert eq_filter("id", 12) == "id=eq.12"
