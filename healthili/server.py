"""Asyncio HTTP listener serving a single health endpoint."""

from __future__ import annotations

import asyncio
import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from healthili.constants import (
    HEADER_TIMEOUT_SECONDS,
    HEALTH_CONTENT_TYPE,
    MAX_HEADER_LINES,
    MAX_REQUEST_LINE_BYTES,
)
from healthili.errors import EndpointCloseError, HealthiliError
from healthili.logger import get_logger
from healthili.models import EndpointSettings
from healthili.status import evaluate

if TYPE_CHECKING:
    from types import TracebackType

    from healthili.models import HealthCheck

logger = get_logger()


class _MalformedRequestError(Exception):
    """The peer sent something that is not an HTTP/1.x request head."""


def render_response(status: HTTPStatus, body: bytes = b"", content_type: str | None = None) -> bytes:
    """Render a complete HTTP/1.1 response that closes the connection."""
    head = [f"HTTP/1.1 {status.value} {status.phrase}"]
    if content_type:
        head.append(f"Content-Type: {content_type}")
    head.append(f"Content-Length: {len(body)}")
    head.append("Connection: close")
    return ("\r\n".join(head) + "\r\n\r\n").encode("latin-1") + body


async def read_request_head(reader: asyncio.StreamReader) -> tuple[str, str] | None:
    """Read the request line and headers; return ``(method, target)``.

    Returns None if the peer closed the connection before sending anything.
    Headers are consumed and ignored.
    """
    try:
        request_line = await reader.readline()
    except ValueError as exc:
        raise _MalformedRequestError("request line too long") from exc
    if not request_line:
        return None

    parts = request_line.decode("latin-1").split()
    if len(parts) != 3 or not parts[2].startswith("HTTP/1."):
        raise _MalformedRequestError(f"invalid request line: {request_line[:80]!r}")

    for _ in range(MAX_HEADER_LINES + 1):
        try:
            line = await reader.readline()
        except ValueError as exc:
            raise _MalformedRequestError("header line too long") from exc
        if line in (b"\r\n", b"\n", b""):
            break
    else:
        raise _MalformedRequestError("too many header lines")

    method, target, _version = parts
    return method, target


class HealthEndpoint:
    """A running health endpoint: one listening socket, one health check.

    The endpoint moves from *created* (after :meth:`start`) to *closed* (after
    :meth:`close`); a closed endpoint cannot be restarted.
    """

    def __init__(self, check: HealthCheck, settings: EndpointSettings | None = None) -> None:
        self.check = check
        self.settings = settings or EndpointSettings()
        self._server: asyncio.Server | None = None
        self._port: int | None = None
        self._closed = False
        self._connections: set[asyncio.StreamWriter] = set()
        self._log = logger.bind(path=self.settings.path)

    @property
    def port(self) -> int:
        """Port the endpoint is bound to (the configured port until started)."""
        return self._port if self._port is not None else self.settings.port

    @property
    def path(self) -> str:
        return self.settings.path

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> HealthEndpoint:
        """Bind the listening socket and start accepting connections."""
        if self._server is not None:
            raise HealthiliError("health endpoint already started")

        self._server = await asyncio.start_server(
            self._handle_connection,
            host=self.settings.host,
            port=self.settings.port,
            limit=MAX_REQUEST_LINE_BYTES,
        )
        self._port = self._server.sockets[0].getsockname()[1]
        self._log = self._log.bind(port=self._port)
        self._log.info("health endpoint listening")
        return self

    async def close(self) -> None:
        """Stop accepting connections and wait for the socket to be released.

        Raises:
            EndpointCloseError: if the endpoint is not running or the socket
                could not be released.
        """
        if self._server is None:
            raise EndpointCloseError("health endpoint was never started")
        if self._closed:
            raise EndpointCloseError("health endpoint is already closed")

        self._closed = True
        try:
            self._server.close()
            if self._connections:
                self._log.info("closing open connections", count=len(self._connections))
            for writer in list(self._connections):
                writer.close()
            await self._server.wait_closed()
        except OSError as exc:
            raise EndpointCloseError(f"failed to release health endpoint socket: {exc}") from exc
        self._log.info("health endpoint closed")

    async def __aenter__(self) -> HealthEndpoint:
        if self._server is None:
            await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self.closed:
            await self.close()

    async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._connections.add(writer)
        try:
            if self._closed:
                return
            request = await asyncio.wait_for(read_request_head(reader), timeout=HEADER_TIMEOUT_SECONDS)
            if request is None:
                self._log.debug("client disconnected")
                return
            method, target = request
            writer.write(await self._respond(method, target))
            await writer.drain()
        except TimeoutError:
            self._log.debug("health request head timed out", timeout_seconds=HEADER_TIMEOUT_SECONDS)
            await self._reject(writer, HTTPStatus.REQUEST_TIMEOUT)
        except _MalformedRequestError as exc:
            self._log.debug("malformed health request", error=str(exc))
            await self._reject(writer, HTTPStatus.BAD_REQUEST)
        except ConnectionError:
            self._log.debug("client disconnected")
        except Exception:
            self._log.exception("error handling health request")
        finally:
            self._connections.discard(writer)
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

    @staticmethod
    async def _reject(writer: asyncio.StreamWriter, status: HTTPStatus) -> None:
        writer.write(render_response(status))
        with contextlib.suppress(ConnectionError):
            await writer.drain()

    async def _respond(self, method: str, target: str) -> bytes:
        if target != self.settings.path:
            self._log.debug("health request path not found", method=method, target=target)
            return render_response(HTTPStatus.NOT_FOUND)

        http_status, payload = await evaluate(self.check, self.settings)
        body = payload.to_json()
        response = render_response(http_status, body, content_type=HEALTH_CONTENT_TYPE)
        if method == "HEAD":
            return response[: len(response) - len(body)]
        return response


async def create_endpoint(
    check: HealthCheck,
    settings: EndpointSettings | None = None,
    **options: Any,
) -> HealthEndpoint:
    """Create and start a health endpoint serving *check*.

    Options may be given as an ``EndpointSettings`` instance, as keyword
    arguments (``port=1234``, ``hideError=True``, ...), or both, in which case
    the keywords override the instance.
    """
    if options:
        aliases = {name: field.alias or name for name, field in EndpointSettings.model_fields.items()}
        merged = settings.model_dump(by_alias=True) if settings is not None else {}
        merged.update({aliases.get(key, key): value for key, value in options.items()})
        settings = EndpointSettings.model_validate(merged)
    endpoint = HealthEndpoint(check, settings)
    return await endpoint.start()
