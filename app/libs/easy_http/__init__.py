"""Fluent request builder over an httpx transport."""

from .client import Client, new_client
from .exceptions import (
    EasyHttpError,
    PostHookError,
    PreHookError,
    RequestAlreadySentError,
    TransportError,
    URLParseError,
)
from .middleware import (
    headers_hook,
    logging_hooks,
    parse_response_body,
    timeout_hook,
    trace_id_hook,
    user_agent_hook,
)
from .models import Body, Cookie, File, JsonBody, RawBody, StreamBody, TextBody
from .params import Headers, Params, merge_params
from .request import Request
from .response import Response
from .transport import HttpxTransport, PoolLimits, ProxyConfig, Transport, TransportOptions
from .types import RequestHook, ResponseHook

__all__ = [
    "Client",
    "new_client",
    "Request",
    "Response",
    "Params",
    "Headers",
    "merge_params",
    "Body",
    "RawBody",
    "TextBody",
    "StreamBody",
    "JsonBody",
    "File",
    "Cookie",
    "Transport",
    "HttpxTransport",
    "TransportOptions",
    "PoolLimits",
    "ProxyConfig",
    "RequestHook",
    "ResponseHook",
    "EasyHttpError",
    "URLParseError",
    "PreHookError",
    "TransportError",
    "PostHookError",
    "RequestAlreadySentError",
    "headers_hook",
    "timeout_hook",
    "logging_hooks",
    "user_agent_hook",
    "trace_id_hook",
    "parse_response_body",
]
