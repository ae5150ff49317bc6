from datetime import datetime, timedelta
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx

from .models import Cookie
from .params import Headers

if TYPE_CHECKING:
    from .request import Request


class Response:
    """Read-only view over the transport's raw response.

    ``raw`` is ``None`` when the transport call failed before a response was
    received; accessors then return empty values.
    """

    def __init__(self, request: "Request", raw: httpx.Response | None, received_at: datetime):
        self._request = request
        self._raw = raw
        self._received_at = received_at

    @property
    def request(self) -> "Request":
        return self._request

    @property
    def raw(self) -> httpx.Response | None:
        return self._raw

    @property
    def received_at(self) -> datetime:
        return self._received_at

    @property
    def time(self) -> timedelta:
        if self._request.time is None:
            return timedelta(0)
        return self._received_at - self._request.time

    @property
    def status_code(self) -> int:
        if self._raw is None:
            return 0
        return self._raw.status_code

    @property
    def status(self) -> str:
        if self._raw is None:
            return ""
        return f"{self._raw.status_code} {self._raw.reason_phrase}".strip()

    @property
    def body(self) -> bytes:
        if self._raw is None:
            return b""
        return self._raw.content

    @property
    def text(self) -> str:
        if self._raw is None:
            return ""
        return self._raw.text.strip()

    @property
    def headers(self) -> Headers:
        headers = Headers()
        if self._raw is None:
            return headers
        for key, value in self._raw.headers.multi_items():
            headers.add(key, value)
        return headers

    @property
    def cookies(self) -> list[Cookie]:
        if self._raw is None:
            return []
        return [Cookie(name=c.name, value=c.value or "") for c in self._raw.cookies.jar]

    def result(self) -> Any:
        return self._request.result

    def error(self) -> Any:
        return self._request.error

    @property
    def is_success(self) -> bool:
        return 199 < self.status_code < 300

    @property
    def is_error(self) -> bool:
        # 3xx is neither success nor error
        return self.status_code > 399

    def to_raw_http_response(self) -> str:
        status_code = self.status_code
        try:
            reason = HTTPStatus(status_code).phrase
        except ValueError:
            reason = ""
        lines = [f"HTTP/1.1 {status_code} {reason}".rstrip()]
        for key, values in self.headers.items():
            lines.extend(f"{key}: {value}" for value in values)
        return "\r\n".join(lines) + "\r\n\r\n" + self.body.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}] {self._request.method} {self._request.url}>"
