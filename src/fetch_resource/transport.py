"""
HTTP transport using httpx.

The transport is the only place network I/O happens. Connection errors
and timeouts are returned as a TransportResponse carrying the error;
every HTTP status, success or not, is returned as a normal response.
"""
import logging
import time
from typing import Optional

import httpx

from .config import ResolvedConfig
from .diagnostics import print_request, print_response
from .types import RequestDescriptor, TransportResponse

logger = logging.getLogger("fetch_resource.transport")

# Methods whose parameters go in the query string
QUERY_METHODS = ("GET", "DELETE")


class HttpxTransport:
    """Default transport backed by ``httpx.AsyncClient``.

    The client is created lazily on first send so that it binds to the
    event loop the executor runs it on.
    """

    def __init__(
        self,
        config: ResolvedConfig,
        httpx_client: Optional[httpx.AsyncClient] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._client = httpx_client
        self._http_transport = http_transport
        self._closed = False

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            auth = None
            if self._config.account_sid and self._config.auth_token:
                auth = httpx.BasicAuth(self._config.account_sid, self._config.auth_token)
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                headers={"accept": "application/json", **self._config.headers},
                auth=auth,
                timeout=httpx.Timeout(
                    connect=self._config.timeout.connect,
                    read=self._config.timeout.read,
                    write=self._config.timeout.write,
                    pool=self._config.timeout.connect,
                ),
                verify=self._config.verify_ssl,
                transport=self._http_transport,
            )
        return self._client

    def build_request(self, descriptor: RequestDescriptor) -> httpx.Request:
        """Translate a descriptor into an httpx request."""
        client = self._ensure_client()
        path = descriptor.render_path()
        if descriptor.method in QUERY_METHODS:
            return client.build_request(descriptor.method, path, params=descriptor.parameters)
        return client.build_request(descriptor.method, path, data=descriptor.parameters)

    async def send(self, descriptor: RequestDescriptor) -> TransportResponse:
        """Send the request; transport failures come back as response.error."""
        if self._closed:
            raise RuntimeError("Transport has been closed")

        client = self._ensure_client()
        request = self.build_request(descriptor)
        url = str(request.url)

        logger.debug(f"HttpxTransport.send: method={descriptor.method}, url={url}")
        if self._config.debug:
            print_request(descriptor, url, dict(request.headers))

        start = time.monotonic()
        try:
            response = await client.send(request)
        except httpx.TransportError as e:
            elapsed = (time.monotonic() - start) * 1000
            logger.warning(f"HttpxTransport.send: {descriptor.method} {url} failed: {e!r}")
            result = TransportResponse(
                url=url,
                elapsed_ms=round(elapsed, 2),
                error=e,
            )
        else:
            elapsed = (time.monotonic() - start) * 1000
            logger.debug(
                f"HttpxTransport.send: {descriptor.method} {url} -> {response.status_code} in {elapsed:.1f}ms"
            )
            result = TransportResponse(
                status_code=response.status_code,
                status_description=response.reason_phrase or "",
                headers=dict(response.headers),
                body=response.content,
                url=url,
                elapsed_ms=round(elapsed, 2),
            )

        if self._config.debug:
            print_response(result)
        return result

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        self._closed = True
        if self._client is not None:
            await self._client.aclose()
            self._client = None
