import logging
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlparse, urlunparse

import httpx

from configs import app_config

logger = logging.getLogger(__name__)


@dataclass
class PoolLimits:
    max_connections: int = field(default_factory=lambda: app_config.HTTP_CLIENT_MAX_CONNECTIONS)
    max_keepalive: int = field(default_factory=lambda: app_config.HTTP_CLIENT_MAX_KEEPALIVE)
    keepalive_expiry: float = field(default_factory=lambda: app_config.HTTP_CLIENT_KEEPALIVE_EXPIRY)

    def to_httpx_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive,
            keepalive_expiry=self.keepalive_expiry,
        )


@dataclass
class ProxyConfig:
    url: str
    auth: tuple[str, str] | None = None

    def to_httpx_proxy(self) -> str:
        if not self.auth:
            return self.url
        parsed = urlparse(self.url)
        netloc = f"{self.auth[0]}:{self.auth[1]}@{parsed.hostname}"
        if parsed.port:
            netloc += f":{parsed.port}"
        return urlunparse(parsed._replace(netloc=netloc))


@dataclass
class TransportOptions:
    """Connection-level settings handed to the underlying httpx client."""

    limits: PoolLimits = field(default_factory=PoolLimits)
    proxy: str | ProxyConfig | None = field(default_factory=lambda: app_config.HTTP_CLIENT_PROXY)
    timeout: float = field(default_factory=lambda: app_config.HTTP_CLIENT_TIMEOUT)
    follow_redirects: bool = field(
        default_factory=lambda: app_config.HTTP_CLIENT_FOLLOW_REDIRECTS
    )
    verify: bool = field(default_factory=lambda: app_config.HTTP_CLIENT_VERIFY_SSL)

    def proxy_url(self) -> str | None:
        if not self.proxy:
            return None
        if isinstance(self.proxy, str):
            return self.proxy
        return self.proxy.to_httpx_proxy()


class Transport(Protocol):
    async def do(self, request: httpx.Request) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """Transport backed by a lazily created ``httpx.AsyncClient``."""

    def __init__(
        self,
        options: TransportOptions | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._options = options or TransportOptions()
        self._client = client

    @property
    def options(self) -> TransportOptions:
        return self._options

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=self._options.limits.to_httpx_limits(),
                proxy=self._options.proxy_url(),
                timeout=self._options.timeout,
                follow_redirects=self._options.follow_redirects,
                verify=self._options.verify,
            )
        return self._client

    async def do(self, request: httpx.Request) -> httpx.Response:
        client = self._ensure_client()
        # requests built outside httpx.AsyncClient carry no timeout of their own
        request.extensions.setdefault("timeout", httpx.Timeout(self._options.timeout).as_dict())
        return await client.send(request)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        self._ensure_client()
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()
