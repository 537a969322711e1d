"""
Copyright (C) 2026 POIKUS LLC.  All Rights Reserved.
PKSNetwork, a product of POIKUS LLC

Unit tests for transport adapters.
"""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
import requests

from pksnetwork.core.transport import TransportRequest, TransportResponse
from pksnetwork.exceptions import NetworkError, NetworkErrorKind
from pksnetwork.sdk.adapters.base import AsyncBaseAdapter, BaseAdapter
from pksnetwork.sdk.adapters.http import (
    AsyncHttpAdapter,
    HttpAdapter,
    map_httpx_error,
    map_requests_error,
)
from pksnetwork.sdk.adapters.mock import AsyncMockAdapter, MockAdapter


def _request(method: str = "GET", url: str = "https://api.example.com/todos/1", **kwargs) -> TransportRequest:
    return TransportRequest(method=method, url=url, **kwargs)


class TestTransportRequest:

    def test_header_lookup_is_case_insensitive(self):
        request = _request(headers={"content-type": "application/json"})

        assert request.get_header("Content-Type") == "application/json"
        assert request.get_header("Accept") is None

    def test_set_header_replaces_any_case(self):
        request = _request(headers={"authorization": "Bearer old"})

        request.set_header("Authorization", "Bearer new")

        assert request.headers == {"Authorization": "Bearer new"}


class TestMockAdapter:

    def test_is_base_adapter(self):
        assert isinstance(MockAdapter(), BaseAdapter)

    def test_returns_registered_response(self):
        response = TransportResponse(status_code=200, body=b'{"id": 1}')
        adapter = MockAdapter({("GET", "/todos/1"): response})

        assert adapter.send(_request()) is response

    def test_matches_on_path_ignoring_query(self):
        response = TransportResponse(status_code=200, body=b"[]")
        adapter = MockAdapter({("GET", "/todos"): response})

        assert adapter.send(_request(url="https://api.example.com/todos?page=2")) is response

    def test_unmatched_returns_404(self):
        result = MockAdapter().send(_request())

        assert result.status_code == 404

    def test_method_is_part_of_key(self):
        adapter = MockAdapter({("GET", "/todos/1"): TransportResponse(status_code=200)})

        assert adapter.send(_request(method="DELETE")).status_code == 404

    def test_raises_registered_exception(self):
        adapter = MockAdapter()
        adapter.add("get", "/todos/1", NetworkError(NetworkErrorKind.NO_NETWORK))

        with pytest.raises(NetworkError) as exc_info:
            adapter.send(_request())

        assert exc_info.value.kind is NetworkErrorKind.NO_NETWORK

    def test_callable_result(self):
        adapter = MockAdapter()
        adapter.add("POST", "/echo", lambda req: TransportResponse(status_code=201, body=req.body))

        result = adapter.send(_request(method="POST", url="https://api.example.com/echo", body=b"hi"))

        assert result.status_code == 201
        assert result.body == b"hi"

    def test_records_sent_requests(self):
        adapter = MockAdapter()
        adapter.send(_request())
        adapter.send(_request(method="POST"))

        assert [r.method for r in adapter.sent_requests] == ["GET", "POST"]

    def test_close_clears_state(self):
        adapter = MockAdapter({("GET", "/todos/1"): TransportResponse(status_code=200)})
        adapter.send(_request())

        adapter.close()

        assert adapter.sent_requests == []
        assert adapter.is_connected is True


class TestAsyncMockAdapter:

    def test_is_async_base_adapter(self):
        assert isinstance(AsyncMockAdapter(), AsyncBaseAdapter)

    @pytest.mark.asyncio
    async def test_send(self):
        response = TransportResponse(status_code=200, body=b"{}")
        adapter = AsyncMockAdapter({("GET", "/todos/1"): response})

        assert await adapter.send(_request()) is response

    @pytest.mark.asyncio
    async def test_aclose(self):
        adapter = AsyncMockAdapter()
        await adapter.send(_request())

        await adapter.aclose()

        assert adapter.sent_requests == []


class TestRequestsErrorMapping:

    @pytest.mark.parametrize("error, kind", [
        (requests.exceptions.ConnectTimeout("connect timed out"), NetworkErrorKind.TIMEOUT),
        (requests.exceptions.ReadTimeout("read timed out"), NetworkErrorKind.TIMEOUT),
        (requests.exceptions.ConnectionError("refused"), NetworkErrorKind.NO_NETWORK),
        (requests.exceptions.MissingSchema("no schema"), NetworkErrorKind.INVALID_URL),
        (requests.exceptions.InvalidURL("bad url"), NetworkErrorKind.INVALID_URL),
        (requests.exceptions.TooManyRedirects("loop"), NetworkErrorKind.UNKNOWN),
    ])
    def test_mapping(self, error, kind):
        assert map_requests_error(error).kind is kind


class TestHttpxErrorMapping:

    @pytest.mark.parametrize("error, kind", [
        (httpx.ConnectTimeout("connect timed out"), NetworkErrorKind.TIMEOUT),
        (httpx.ReadTimeout("read timed out"), NetworkErrorKind.TIMEOUT),
        (httpx.ConnectError("refused"), NetworkErrorKind.NO_NETWORK),
        (httpx.UnsupportedProtocol("ftp"), NetworkErrorKind.INVALID_URL),
        (httpx.InvalidURL("bad url"), NetworkErrorKind.INVALID_URL),
        (httpx.RemoteProtocolError("garbage"), NetworkErrorKind.UNKNOWN),
    ])
    def test_mapping(self, error, kind):
        assert map_httpx_error(error).kind is kind


class TestHttpAdapter:
    """Tests for the requests-backed adapter."""

    def test_send_success(self):
        adapter = HttpAdapter(default_headers={"User-Agent": "PKSNetwork/test"})
        fake_response = MagicMock()
        fake_response.status_code = 200
        fake_response.headers = {"Content-Type": "application/json"}
        fake_response.content = b'{"id": 1}'

        with patch.object(adapter._session, "request", return_value=fake_response) as mock_request:
            result = adapter.send(_request(headers={"Accept": "application/json"}, body=None, timeout=5))

        assert result.status_code == 200
        assert result.body == b'{"id": 1}'
        assert result.headers == {"Content-Type": "application/json"}
        assert result.elapsed_ms >= 0
        mock_request.assert_called_once_with(
            method="GET",
            url="https://api.example.com/todos/1",
            headers={"Accept": "application/json"},
            data=None,
            timeout=5,
        )
        assert adapter._session.headers["User-Agent"] == "PKSNetwork/test"

    def test_send_maps_transport_errors(self):
        adapter = HttpAdapter()

        with patch.object(
            adapter._session, "request", side_effect=requests.exceptions.ConnectionError("refused")
        ):
            with pytest.raises(NetworkError) as exc_info:
                adapter.send(_request())

        assert exc_info.value.kind is NetworkErrorKind.NO_NETWORK
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_close(self):
        adapter = HttpAdapter()
        assert adapter.is_connected is True

        adapter.close()
        adapter.close()

        assert adapter.is_connected is False
        with pytest.raises(NetworkError):
            adapter.send(_request())


class TestAsyncHttpAdapter:
    """Tests for the httpx-backed adapter, driven through httpx.MockTransport."""

    @staticmethod
    def _with_transport(adapter: AsyncHttpAdapter, handler) -> None:
        adapter._client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            headers=adapter._default_headers,
        )

    @pytest.mark.asyncio
    async def test_send_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = request.content
            seen["user_agent"] = request.headers.get("User-Agent")
            seen["authorization"] = request.headers.get("Authorization")
            return httpx.Response(201, json={"id": 201})

        adapter = AsyncHttpAdapter(default_headers={"User-Agent": "PKSNetwork/test"})
        self._with_transport(adapter, handler)

        result = await adapter.send(_request(
            method="POST",
            url="https://api.example.com/todos",
            headers={"Authorization": "Bearer abc"},
            body=b'{"title":"x"}',
        ))
        await adapter.aclose()

        assert result.status_code == 201
        assert json.loads(result.body) == {"id": 201}
        assert seen == {
            "method": "POST",
            "url": "https://api.example.com/todos",
            "body": b'{"title":"x"}',
            "user_agent": "PKSNetwork/test",
            "authorization": "Bearer abc",
        }

    @pytest.mark.asyncio
    async def test_send_maps_transport_errors(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        adapter = AsyncHttpAdapter()
        self._with_transport(adapter, handler)

        with pytest.raises(NetworkError) as exc_info:
            await adapter.send(_request())
        await adapter.aclose()

        assert exc_info.value.kind is NetworkErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"Location": "https://api.example.com/new"})
            return httpx.Response(200, json={"id": 1})

        adapter = AsyncHttpAdapter(transport=httpx.MockTransport(handler))

        result = await adapter.send(_request(url="https://api.example.com/old"))
        await adapter.aclose()

        assert result.status_code == 200
        assert json.loads(result.body) == {"id": 1}

    @pytest.mark.asyncio
    async def test_closed_adapter_rejects_send(self):
        adapter = AsyncHttpAdapter()
        await adapter.aclose()

        assert adapter.is_connected is False
        with pytest.raises(NetworkError) as exc_info:
            await adapter.send(_request())

        assert exc_info.value.kind is NetworkErrorKind.UNKNOWN
