"""
loglane_core.middleware
~~~~~~~~~~~~~~~~~~~~~~~
HTTP access logging.

RequestObserver
    Per-request observer.  Records a start time when created and emits
    one ``"HTTP request"`` record the first time :meth:`finish` is called
    with the final status code.  Severity is ``error`` for status >= 400,
    ``info`` otherwise.

RequestLoggingMiddleware
    Pure ASGI middleware that drives a RequestObserver.  Forwards to the
    downstream app immediately, tees the request body as the app reads
    it, and finishes the observer only after the last response body
    chunk has been sent, so status and timing are final.  A response
    that never completes is never logged.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from starlette.datastructures import Headers, QueryParams
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from loglane_core.levels import LogLevel
from loglane_core.models import HttpAccessRecord

if TYPE_CHECKING:
    from loglane_core.logger import Logger

ACCESS_MESSAGE = "HTTP request"


class RequestObserver:
    """Observe one request/response cycle and log it on completion."""

    def __init__(
        self,
        logger: Logger,
        *,
        method: str,
        url: str,
        headers: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._logger = logger
        self._clock = clock
        self._start = clock()
        self.method = method
        self.url = url
        self.headers = dict(headers or {})
        self.query = dict(query or {})
        self.body = body
        self.finished = False

    def finish(self, status_code: int) -> HttpAccessRecord | None:
        """Emit the access record.  Only the first call has any effect.

        Returns:
            The record that was logged, or ``None`` on repeat calls.
        """
        if self.finished:
            return None
        self.finished = True

        elapsed_ms = max(0.0, (self._clock() - self._start) * 1000)
        record = HttpAccessRecord(
            method=self.method,
            url=self.url,
            status=status_code,
            response_time=round(elapsed_ms, 3),
            headers=self.headers,
            query=self.query,
            body=self.body,
        )
        level = LogLevel.ERROR if record.is_error else LogLevel.INFO
        self._logger.log(
            level.value, ACCESS_MESSAGE, self._logger.sanitize(record.to_log_data())
        )
        return record


def _request_url(scope: Scope) -> str:
    url = f"{scope.get('root_path', '')}{scope.get('path', '')}"
    query_string = scope.get("query_string", b"")
    if query_string:
        url = f"{url}?{query_string.decode('latin-1')}"
    return url


def _query_dict(scope: Scope) -> dict[str, Any]:
    params = QueryParams(scope.get("query_string", b""))
    result: dict[str, Any] = {}
    for key in params.keys():
        values = params.getlist(key)
        result[key] = values[0] if len(values) == 1 else values
    return result


def _decode_body(raw: bytes, content_type: str) -> Any:
    if not raw:
        return {}
    if "json" in content_type:
        try:
            return json.loads(raw)
        except ValueError:
            pass
    return raw.decode("utf-8", errors="replace")


class RequestLoggingMiddleware:
    """Log every HTTP request through *logger* once its response finishes.

    Add it with :meth:`loglane_core.logger.Logger.middleware`, or
    directly::

        app.add_middleware(RequestLoggingMiddleware, logger=log)
    """

    def __init__(self, app: ASGIApp, logger: Logger) -> None:
        self.app = app
        self.logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        observer = RequestObserver(
            self.logger,
            method=scope.get("method", "GET"),
            url=_request_url(scope),
            headers=dict(headers.items()),
            query=_query_dict(scope),
        )
        content_type = headers.get("content-type", "")
        chunks: list[bytes] = []
        status_code = 500
        response_started = False

        async def receive_wrapper() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                chunks.append(message.get("body", b""))
            return message

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, response_started
            if message["type"] == "http.response.start":
                status_code = message["status"]
                response_started = True
            await send(message)
            if message["type"] == "http.response.body" and not message.get(
                "more_body", False
            ):
                observer.body = _decode_body(b"".join(chunks), content_type)
                observer.finish(status_code)

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        except Exception:
            if not response_started:
                observer.body = _decode_body(b"".join(chunks), content_type)
                observer.finish(500)
            raise
