import os
from collections.abc import Mapping
from datetime import datetime
from http.cookies import Morsel
from typing import TYPE_CHECKING, Any, BinaryIO

import httpx

from .models import Body, File, JsonBody, body_from_value
from .params import Headers, Params, parse_query_string

if TYPE_CHECKING:
    from .client import Client
    from .response import Response

METHOD_GET = "GET"
METHOD_POST = "POST"
METHOD_PUT = "PUT"
METHOD_DELETE = "DELETE"
METHOD_PATCH = "PATCH"
METHOD_HEAD = "HEAD"
METHOD_OPTIONS = "OPTIONS"


class Request:
    """A single call built on top of a Client's defaults.

    Created by ``Client.r()``; configured through chained setters and consumed
    by exactly one execution. Not safe to share between tasks.
    """

    def __init__(self, client: "Client"):
        self.client = client
        self.url: str = ""
        self.method: str = METHOD_GET
        self.query_params: Params = Params()
        self.path_params: dict[str, str] = {}
        self.header: Headers = Headers()
        self.cookies: dict[str, str] = {}
        self.form_data: Params = Params()
        self.files: list[File] = []
        self.body: Body | None = None
        self.context: dict[str, Any] = {}

        self.result_type: Any = None
        self.error_type: Any = None
        self.result: Any = None
        self.error: Any = None

        self.time: datetime | None = None
        self.executed = False

    @property
    def is_multipart(self) -> bool:
        return bool(self.files)

    # Query params
    def set_query_param(self, param: str, value: str) -> "Request":
        self.query_params.set(param, value)
        return self

    def set_query_params(self, params: Mapping[str, str]) -> "Request":
        for param, value in params.items():
            self.set_query_param(param, value)
        return self

    def set_query_params_from_values(self, params: Mapping[str, list[str]]) -> "Request":
        for param, values in params.items():
            for value in values:
                self.query_params.add(param, value)
        return self

    def set_query_string(self, query: str) -> "Request":
        for param, value in parse_query_string(query):
            self.query_params.add(param, value)
        return self

    def add_query_param(self, param: str, value: str) -> "Request":
        self.query_params.add(param, value)
        return self

    def add_query_params(self, params: Mapping[str, str]) -> "Request":
        for param, value in params.items():
            self.add_query_param(param, value)
        return self

    # Path params
    def set_path_param(self, param: str, value: str) -> "Request":
        self.path_params[param] = str(value)
        return self

    def set_path_params(self, params: Mapping[str, str]) -> "Request":
        for param, value in params.items():
            self.set_path_param(param, value)
        return self

    # Headers
    def set_header(self, header: str, value: str) -> "Request":
        self.header.set(header, value)
        return self

    def set_headers(self, headers: Mapping[str, str]) -> "Request":
        for header, value in headers.items():
            self.set_header(header, value)
        return self

    def set_header_multi_values(self, headers: Mapping[str, list[str]]) -> "Request":
        for header, values in headers.items():
            self.header.set_all(header, values)
        return self

    def add_header(self, header: str, value: str) -> "Request":
        self.header.add(header, value)
        return self

    def add_headers(self, headers: Mapping[str, str]) -> "Request":
        for header, value in headers.items():
            self.add_header(header, value)
        return self

    def add_header_multi_values(self, headers: Mapping[str, list[str]]) -> "Request":
        for header, values in headers.items():
            for value in values:
                self.add_header(header, value)
        return self

    def set_content_type(self, content_type: str) -> "Request":
        return self.set_header("Content-Type", content_type)

    def set_json_content_type(self) -> "Request":
        return self.set_content_type("application/json")

    # Cookies
    def set_cookie(self, cookie: Morsel | tuple[str, str]) -> "Request":
        name, value = (cookie.key, cookie.value) if isinstance(cookie, Morsel) else cookie
        self.cookies[name] = value
        return self

    def set_cookies(self, cookies: list[Morsel | tuple[str, str]]) -> "Request":
        for cookie in cookies:
            self.set_cookie(cookie)
        return self

    # Body
    def set_body(self, body: Any) -> "Request":
        self.body = body_from_value(body)
        return self

    def set_json_body(self, body: Any) -> "Request":
        self.body = JsonBody(body)
        return self

    def set_form_data(self, data: Mapping[str, str]) -> "Request":
        for key, value in data.items():
            self.form_data.set(key, value)
        return self

    def set_form_data_from_values(self, data: Mapping[str, list[str]]) -> "Request":
        for key, values in data.items():
            for value in values:
                self.form_data.add(key, value)
        return self

    def set_files(self, files: Mapping[str, str]) -> "Request":
        for param, path in files.items():
            self.files.append(File(name=os.path.basename(path), param_name=param, path=path))
        return self

    def set_file_reader(self, param: str, file_name: str, reader: BinaryIO) -> "Request":
        self.files.append(File(name=file_name, param_name=param, reader=reader))
        return self

    # Destinations
    def set_result(self, result_type: Any) -> "Request":
        self.result_type = result_type
        return self

    def set_error(self, error_type: Any) -> "Request":
        self.error_type = error_type
        return self

    # Context
    def with_context(self, **extensions: Any) -> "Request":
        """Extensions handed to the transport untouched, e.g. ``timeout``."""
        self.context.update(extensions)
        return self

    def set_timeout(self, timeout: float | httpx.Timeout) -> "Request":
        if not isinstance(timeout, httpx.Timeout):
            timeout = httpx.Timeout(timeout)
        self.context["timeout"] = timeout.as_dict()
        return self

    def set_method(self, method: str) -> "Request":
        self.method = method.upper()
        return self

    def set_url(self, url: str) -> "Request":
        self.url = url
        return self

    # Execution
    async def get(self, url: str) -> "Response":
        return await self.execute(METHOD_GET, url)

    async def head(self, url: str) -> "Response":
        return await self.execute(METHOD_HEAD, url)

    async def post(self, url: str) -> "Response":
        return await self.execute(METHOD_POST, url)

    async def put(self, url: str) -> "Response":
        return await self.execute(METHOD_PUT, url)

    async def delete(self, url: str) -> "Response":
        return await self.execute(METHOD_DELETE, url)

    async def options(self, url: str) -> "Response":
        return await self.execute(METHOD_OPTIONS, url)

    async def patch(self, url: str) -> "Response":
        return await self.execute(METHOD_PATCH, url)

    async def send(self) -> "Response":
        return await self.execute(self.method, self.url)

    async def execute(self, method: str, url: str) -> "Response":
        self.method = method.upper()
        self.url = url
        return await self.client.execute(self)

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.url}>"
