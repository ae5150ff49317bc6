import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from extensions.ext_logging import trace_id_var

from .types import RequestHook, ResponseHook

if TYPE_CHECKING:
    from .client import Client
    from .request import Request
    from .response import Response


def timeout_hook(timeout: float) -> RequestHook:
    def hook(client: "Client", request: "Request") -> None:
        request.set_timeout(timeout)

    return hook


def logging_hooks(logger: logging.Logger | None = None) -> tuple[RequestHook, ResponseHook]:
    log = logger or logging.getLogger(__name__)

    def before_request(client: "Client", request: "Request") -> None:
        log.info(f"-> {request.method} {request.url}")

    def after_response(client: "Client", response: "Response") -> None:
        latency_ms = int(response.time / timedelta(milliseconds=1))
        log.info(f"<- {response.status_code} ({latency_ms}ms)")

    return before_request, after_response


def headers_hook(**headers: str) -> RequestHook:
    def hook(client: "Client", request: "Request") -> None:
        request.set_headers(headers)

    return hook


def user_agent_hook(user_agent: str) -> RequestHook:
    def hook(client: "Client", request: "Request") -> None:
        if "User-Agent" not in request.header:
            request.set_header("User-Agent", user_agent)

    return hook


def trace_id_hook(header: str) -> RequestHook:
    """Propagate the trace id of the current logging context."""

    def hook(client: "Client", request: "Request") -> None:
        trace_id = trace_id_var.get()
        if trace_id and header not in request.header:
            request.set_header(header, trace_id)

    return hook


def parse_response_body(client: "Client", response: "Response") -> None:
    """Decode the body into the request's result or error destination, if one is set."""
    request = response.request
    if not response.body:
        return
    if response.is_success and request.result_type is not None:
        request.result = _decode(request.result_type, response.body)
    elif response.is_error and request.error_type is not None:
        request.error = _decode(request.error_type, response.body)


def _decode(target: Any, body: bytes) -> Any:
    if target is bytes:
        return body
    if target is str:
        return body.decode("utf-8")
    return TypeAdapter(target).validate_json(body)

