import httpx
import pytest

from errors import FetchError
from services.http_client import fetch_json

URL = "https://upstream.test/data.json"


async def test_fetch_json_returns_decoded_body() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["headers"] = request.headers
        return httpx.Response(200, json={"03": {"0314": []}})

    payload = await fetch_json(
        URL,
        {"Referer": "https://m.douban.com/subject_collection"},
        transport=httpx.MockTransport(handler),
    )

    assert payload == {"03": {"0314": []}}
    assert seen["headers"]["referer"] == "https://m.douban.com/subject_collection"


async def test_fetch_json_non_2xx_raises_fetch_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(FetchError) as exc_info:
        await fetch_json(URL, transport=transport)

    assert exc_info.value.status_code == 502
    assert "HTTP 503" in str(exc_info.value)


async def test_fetch_json_network_error_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError) as exc_info:
        await fetch_json(URL, transport=httpx.MockTransport(handler))

    assert exc_info.value.url == URL


async def test_fetch_json_invalid_json_raises_fetch_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    with pytest.raises(FetchError) as exc_info:
        await fetch_json(URL, transport=transport)

    assert exc_info.value.reason == "response body is not valid JSON"
