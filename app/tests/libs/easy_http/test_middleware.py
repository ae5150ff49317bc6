import logging
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from extensions.ext_logging import bind_trace_id, trace_id_var
from libs.easy_http.middleware import (
    headers_hook,
    logging_hooks,
    parse_response_body,
    timeout_hook,
    trace_id_hook,
    user_agent_hook,
)
from libs.easy_http.response import Response


def _response(request, status_code=200, content=b""):
    request.time = datetime.now(timezone.utc)
    return Response(
        request,
        httpx.Response(status_code, content=content),
        received_at=request.time + timedelta(milliseconds=15),
    )


class TestHeadersHook:
    def test_sets_headers(self, client):
        request = client.r().set_header("X-Keep", "1")
        headers_hook(**{"X-Env": "prod"})(client, request)
        assert request.header.get("X-Env") == "prod"
        assert request.header.get("X-Keep") == "1"


class TestTimeoutHook:
    def test_timeout_override(self, client):
        request = client.r().set_timeout(30.0)
        timeout_hook(60.0)(client, request)
        assert request.context["timeout"]["read"] == 60.0


class TestUserAgentHook:
    def test_only_when_absent(self, client):
        hook = user_agent_hook("agent/1")
        request = client.r()
        hook(client, request)
        assert request.header.get("User-Agent") == "agent/1"

        request = client.r().set_header("user-agent", "mine")
        hook(client, request)
        assert request.header.get("User-Agent") == "mine"


class TestTraceIdHook:
    def test_propagates_current_trace_id(self, client):
        token = bind_trace_id("abc123")
        try:
            request = client.r()
            trace_id_hook("X-Trace-Id")(client, request)
        finally:
            trace_id_var.reset(token)
        assert request.header.get("X-Trace-Id") == "abc123"

    def test_no_trace_id_no_header(self, client):
        request = client.r()
        trace_id_hook("X-Trace-Id")(client, request)
        assert "X-Trace-Id" not in request.header

    @pytest.mark.asyncio
    async def test_registered_on_every_client(self, client, transport):
        token = bind_trace_id("feedbeef")
        try:
            await client.r().get("https://api.example.com/data")
        finally:
            trace_id_var.reset(token)
        assert transport.last_request.headers["X-Trace-Id"] == "feedbeef"


class TestLoggingHooks:
    def test_logs_request_and_response(self, client, caplog):
        logger = logging.getLogger("test.easy_http")
        before_request, after_response = logging_hooks(logger)
        request = client.r().set_method("POST").set_url("https://example.com/items")

        with caplog.at_level(logging.INFO, logger="test.easy_http"):
            before_request(client, request)
            after_response(client, _response(request, status_code=201))

        assert caplog.messages == ["-> POST https://example.com/items", "<- 201 (15ms)"]


class TestParseResponseBody:
    def test_raw_destinations(self, client):
        request = client.r().set_result(bytes)
        parse_response_body(client, _response(request, content=b"\x00\x01"))
        assert request.result == b"\x00\x01"

        request = client.r().set_error(str)
        parse_response_body(client, _response(request, status_code=500, content=b"boom"))
        assert request.error == "boom"

    def test_redirect_decodes_nothing(self, client):
        request = client.r().set_result(dict).set_error(dict)
        parse_response_body(client, _response(request, status_code=302, content=b"{}"))
        assert request.result is None
        assert request.error is None

    def test_empty_body_skipped(self, client):
        request = client.r().set_result(dict)
        parse_response_body(client, _response(request, status_code=204))
        assert request.result is None
