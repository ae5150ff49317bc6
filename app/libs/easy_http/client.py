import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from http.cookies import Morsel
from typing import Any

import httpx

from configs import app_config

from .exceptions import PostHookError, PreHookError, RequestAlreadySentError, TransportError
from .merger import build_raw_request, merge_request
from .middleware import parse_response_body, trace_id_hook, user_agent_hook
from .params import Headers, Params, parse_query_string
from .registry import Middlewares
from .request import Request
from .response import Response
from .transport import HttpxTransport, Transport, TransportOptions
from .types import RequestHook, ResponseHook

logger = logging.getLogger(__name__)


class Client:
    """Long-lived holder of request defaults, hooks and the transport.

    One Client is meant to be shared by many concurrent requests. Defaults and
    hooks should be configured at setup time; hook registration stays safe
    while requests are in flight.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        options: TransportOptions | None = None,
    ):
        self.query_params: Params = Params()
        self.path_params: dict[str, str] = {}
        self.header: Headers = Headers()
        self.cookies: dict[str, str] = {}
        self.base_url: httpx.URL | None = None

        self._middlewares = Middlewares()
        self._transport: Transport = transport or HttpxTransport(options)

        self.add_builtin_request_hook(user_agent_hook(app_config.HTTP_CLIENT_USER_AGENT))
        if app_config.HTTP_CLIENT_TRACE_HEADER:
            self.add_builtin_request_hook(trace_id_hook(app_config.HTTP_CLIENT_TRACE_HEADER))
        self.on_after_response(parse_response_body)

    @property
    def transport(self) -> Transport:
        return self._transport

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()

    def set_base_url(self, base_url: str) -> "Client":
        self.base_url = httpx.URL(base_url)
        return self

    def set_query_param(self, param: str, value: str) -> "Client":
        self.query_params.set(param, value)
        return self

    def set_query_params(self, params: Mapping[str, str]) -> "Client":
        for param, value in params.items():
            self.query_params.set(param, value)
        return self

    def set_query_params_from_values(self, params: Mapping[str, list[str]]) -> "Client":
        for param, values in params.items():
            for value in values:
                self.query_params.add(param, value)
        return self

    def set_query_string(self, query: str) -> "Client":
        for param, value in parse_query_string(query):
            self.query_params.add(param, value)
        return self

    def add_query_param(self, param: str, value: str) -> "Client":
        self.query_params.add(param, value)
        return self

    def add_query_params(self, params: Mapping[str, str]) -> "Client":
        for param, value in params.items():
            self.query_params.add(param, value)
        return self

    def set_path_param(self, param: str, value: str) -> "Client":
        self.path_params[param] = str(value)
        return self

    def set_path_params(self, params: Mapping[str, str]) -> "Client":
        for param, value in params.items():
            self.set_path_param(param, value)
        return self

    def set_header(self, header: str, value: str) -> "Client":
        self.header.set(header, value)
        return self

    def set_headers(self, headers: Mapping[str, str]) -> "Client":
        for header, value in headers.items():
            self.header.set(header, value)
        return self

    def set_header_multi_values(self, headers: Mapping[str, list[str]]) -> "Client":
        for header, values in headers.items():
            self.header.set_all(header, values)
        return self

    def add_header(self, header: str, value: str) -> "Client":
        self.header.add(header, value)
        return self

    def add_headers(self, headers: Mapping[str, str]) -> "Client":
        for header, value in headers.items():
            self.header.add(header, value)
        return self

    def add_header_multi_values(self, headers: Mapping[str, list[str]]) -> "Client":
        for header, values in headers.items():
            for value in values:
                self.header.add(header, value)
        return self

    def set_content_type(self, content_type: str) -> "Client":
        return self.set_header("Content-Type", content_type)

    def set_json_content_type(self) -> "Client":
        return self.set_content_type("application/json")

    def set_xml_content_type(self) -> "Client":
        return self.set_content_type("application/xml")

    def set_html_content_type(self) -> "Client":
        return self.set_content_type("text/html")

    def set_form_content_type(self) -> "Client":
        return self.set_content_type("application/x-www-form-urlencoded")

    def set_multipart_content_type(self) -> "Client":
        return self.set_content_type("multipart/form-data")

    def set_cookie(self, cookie: Morsel | tuple[str, str]) -> "Client":
        name, value = (cookie.key, cookie.value) if isinstance(cookie, Morsel) else cookie
        self.cookies[name] = value
        return self

    def set_cookies(self, cookies: list[Morsel | tuple[str, str]]) -> "Client":
        for cookie in cookies:
            self.set_cookie(cookie)
        return self

    def on_before_request(self, hook: RequestHook) -> "Client":
        self._middlewares.user_request_hooks.register(hook)
        return self

    def add_builtin_request_hook(self, hook: RequestHook) -> "Client":
        self._middlewares.builtin_request_hooks.register(hook)
        return self

    def on_after_response(self, hook: ResponseHook) -> "Client":
        self._middlewares.response_hooks.register(hook)
        return self

    def r(self) -> Request:
        return Request(self)

    def new_request(self) -> Request:
        return self.r()

    async def execute(self, request: Request) -> Response:
        if request.executed:
            raise RequestAlreadySentError()
        request.executed = True

        merge_request(self, request)

        user_hooks, builtin_hooks, response_hooks = self._middlewares.snapshot()

        for hook in (*user_hooks, *builtin_hooks):
            try:
                hook(self, request)
            except Exception as e:
                message = f"pre-request hook {_hook_name(hook)} failed: {e}"
                logger.warning(message)
                raise PreHookError(message, hook=hook) from e

        raw_request = build_raw_request(self, request)

        request.time = _now()
        try:
            raw_response = await self._transport.do(raw_request)
        except Exception as e:
            response = Response(request, None, received_at=_now())
            message = f"{request.method} {request.url} failed: {e!r}"
            logger.warning(message)
            raise TransportError(message, response=response) from e

        try:
            raw_response.request
        except RuntimeError:
            # cookies are extracted against the request the response answers
            raw_response.request = raw_request

        response = Response(request, raw_response, received_at=_now())
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")

        for hook in response_hooks:
            try:
                hook(self, response)
            except Exception as e:
                message = f"post-response hook {_hook_name(hook)} failed: {e}"
                logger.warning(message)
                raise PostHookError(message, response=response, hook=hook) from e

        return response


def new_client(
    options: TransportOptions | None = None,
    transport: Transport | None = None,
) -> Client:
    return Client(transport=transport, options=options)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _hook_name(hook: Any) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)
