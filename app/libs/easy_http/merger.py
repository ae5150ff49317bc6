"""Combine client-level defaults with request-level state into one outgoing request.

Request-level values always win per key. Value lists are never combined: a key
set on the request hides every value the client holds for it.
"""

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from .exceptions import URLParseError
from .models import JsonBody
from .params import merge_params

if TYPE_CHECKING:
    from .client import Client
    from .request import Request

logger = logging.getLogger(__name__)

HDR_CONTENT_TYPE = "Content-Type"
HDR_COOKIE = "Cookie"
HDR_HOST = "Host"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MULTIPART_CONTENT_TYPE = "multipart/form-data"

# sub-delims a single path segment may carry unescaped
PATH_SAFE = ":@&=+$"


def parse_request_url(client: "Client", request: "Request") -> None:
    url = request.url
    if client.path_params or request.path_params:
        params = {key: quote(value, safe=PATH_SAFE) for key, value in request.path_params.items()}
        for key, value in client.path_params.items():
            if key not in params:
                params[key] = quote(value, safe=PATH_SAFE)

        # unmatched {placeholders} stay in the URL as they are
        for key, value in params.items():
            url = url.replace("{" + key + "}", value)

    try:
        parsed = httpx.URL(url)
        if client.base_url is not None and parsed.is_relative_url:
            parsed = client.base_url.join(parsed)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise URLParseError(f"invalid request URL {url!r}: {e}") from e

    if client.query_params or request.query_params:
        request.query_params = merge_params(client.query_params, request.query_params)
        if request.query_params:
            encoded = request.query_params.encode()
            raw_query = parsed.query.decode("ascii")
            if raw_query.strip():
                encoded = raw_query + "&" + encoded
            try:
                parsed = parsed.copy_with(query=encoded.encode("ascii"))
            except httpx.InvalidURL as e:
                raise URLParseError(f"invalid query for {url!r}: {e}") from e

    request.url = str(parsed)


def parse_request_header(client: "Client", request: "Request") -> None:
    request.header = merge_params(client.header, request.header)


def parse_request_cookies(client: "Client", request: "Request") -> None:
    for name, value in client.cookies.items():
        request.cookies.setdefault(name, value)


def parse_request_body(client: "Client", request: "Request") -> None:
    if request.is_multipart:
        request.header.set(HDR_CONTENT_TYPE, MULTIPART_CONTENT_TYPE)
    elif request.form_data:
        request.header.set(HDR_CONTENT_TYPE, FORM_CONTENT_TYPE)
    elif isinstance(request.body, JsonBody) and HDR_CONTENT_TYPE not in request.header:
        request.header.set(HDR_CONTENT_TYPE, JSON_CONTENT_TYPE)


def merge_request(client: "Client", request: "Request") -> None:
    parse_request_url(client, request)
    parse_request_header(client, request)
    parse_request_cookies(client, request)
    parse_request_body(client, request)
    logger.debug(f"merged request {request.method} {request.url}")


def build_raw_request(client: "Client", request: "Request") -> httpx.Request:
    headers = request.header.copy()
    if request.cookies and HDR_COOKIE not in headers:
        headers.set(
            HDR_COOKIE, "; ".join(f"{name}={value}" for name, value in request.cookies.items())
        )

    content = None
    data = None
    files = None
    if request.is_multipart:
        # httpx writes the header itself so that it carries the boundary
        if headers.get(HDR_CONTENT_TYPE) == MULTIPART_CONTENT_TYPE:
            headers.delete(HDR_CONTENT_TYPE)
        data = request.form_data.to_dict()
        files = [(f.param_name, (f.name, f.read())) for f in request.files]
    elif request.form_data:
        data = request.form_data.to_dict()
    elif request.body is not None:
        content = request.body.content()

    url = httpx.URL(request.url)
    if host := request.header.get(HDR_HOST):
        url = _with_host(url, host)

    return httpx.Request(
        request.method,
        url,
        headers=headers.multi_items(),
        content=content,
        data=data,
        files=files,
        extensions=dict(request.context),
    )


def _with_host(url: httpx.URL, host: str) -> httpx.URL:
    """Point the call target at an explicit Host header, keeping the port unless it names one."""
    try:
        target = httpx.URL(f"{url.scheme}://{host}")
    except httpx.InvalidURL as e:
        raise URLParseError(f"invalid Host header {host!r}: {e}") from e
    if target.port is not None:
        return url.copy_with(host=target.host, port=target.port)
    return url.copy_with(host=target.host)
