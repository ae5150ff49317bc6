from datetime import datetime, timezone

import httpx
import pytest

from libs.easy_http.response import Response


def _response(client, status_code=200, headers=None, content=b"", raw=True):
    request = client.r().set_url("https://example.com/items")
    request.time = datetime(2024, 1, 1, tzinfo=timezone.utc)
    received_at = datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
    raw_response = None
    if raw:
        raw_response = httpx.Response(
            status_code,
            headers=headers,
            content=content,
            request=httpx.Request("GET", "https://example.com/items"),
        )
    return Response(request, raw_response, received_at=received_at)


class TestResponse:
    def test_body_and_text(self, client):
        response = _response(client, content=b"  hello \n")
        assert response.body == b"  hello \n"
        assert response.text == "hello"

    def test_status(self, client):
        response = _response(client, status_code=404)
        assert response.status_code == 404
        assert response.status == "404 Not Found"

    def test_headers_are_multi_valued(self, client):
        response = _response(client, headers=[("x-tag", "a"), ("x-tag", "b")])
        assert response.headers.get_all("X-Tag") == ["a", "b"]

    def test_cookies(self, client):
        response = _response(
            client,
            headers=[("set-cookie", "session=abc; Path=/"), ("set-cookie", "theme=dark")],
        )
        assert [(c.name, c.value) for c in response.cookies] == [
            ("session", "abc"),
            ("theme", "dark"),
        ]

    def test_time(self, client):
        assert _response(client).time.total_seconds() == 1

    def test_without_raw_response(self, client):
        response = _response(client, raw=False)
        assert response.status_code == 0
        assert response.body == b""
        assert response.text == ""
        assert len(response.headers) == 0
        assert response.cookies == []

    def test_result_and_error_read_from_request(self, client):
        response = _response(client)
        response.request.result = {"ok": True}
        response.request.error = {"message": "nope"}
        assert response.result() == {"ok": True}
        assert response.error() == {"message": "nope"}

    def test_to_raw_http_response(self, client):
        response = _response(client, headers={"content-type": "text/plain"}, content=b"hi")
        dump = response.to_raw_http_response()
        assert dump.startswith("HTTP/1.1 200 OK\r\n")
        assert "Content-Type: text/plain\r\n" in dump
        assert dump.endswith("\r\n\r\nhi")


class TestStatusClassification:
    @pytest.mark.parametrize(
        "status_code, success, error",
        [
            (199, False, False),
            (200, True, False),
            (204, True, False),
            (299, True, False),
            (300, False, False),
            (304, False, False),
            (399, False, False),
            (400, False, True),
            (404, False, True),
            (500, False, True),
        ],
    )
    def test_boundaries(self, client, status_code, success, error):
        response = _response(client, status_code=status_code)
        assert response.is_success is success
        assert response.is_error is error
