"""Low-level REST client for the Momo ``/api/v1`` endpoints.

Resource groups call into :class:`RawClient` with path templates such as
``/api/v1/documents/{documentId}``; the client expands the template,
serializes the query string, applies per-call cancellation and returns the
decoded body. Envelope handling and authentication happen in the transport
(see :mod:`momo_sdk.middleware`), so by the time a body reaches this module it
is already unwrapped.
"""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, Any, Awaitable, TypeVar
from urllib.parse import quote

import httpx

from .errors import RequestAborted
from .instrumentation import track_request

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .options import RequestOptions

T = TypeVar("T")

_PATH_PARAM = re.compile(r"\{([^}]+)\}")


def expand_path(template: str, path_params: Mapping[str, Any] | None = None) -> str:
    """Substitute ``{name}`` placeholders with URL-quoted values."""

    params = path_params or {}

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in params:
            raise ValueError(f"missing path parameter: {name}")
        return quote(str(params[name]), safe="")

    return _PATH_PARAM.sub(_replace, template)


def serialize_query(query: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten query parameters; lists repeat as ``name[]`` and ``None`` is dropped."""

    pairs: list[tuple[str, str]] = []
    for name, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((f"{name}[]", _query_value(item)) for item in value)
        else:
            pairs.append((name, _query_value(value)))
    return pairs


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


async def send_with_cancellation(request: Awaitable[T], options: RequestOptions | None) -> T:
    """Await ``request`` unless the abort signal or the timeout fires first."""

    signal = options.signal if options else None
    timeout_ms = options.timeout_ms if options else None
    if signal is None and timeout_ms is None:
        return await request

    task = asyncio.ensure_future(request)
    if signal is not None and signal.is_set():
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise RequestAborted("request aborted before it was sent")

    waiters: set[asyncio.Future[Any]] = {task}
    signal_task: asyncio.Future[Any] | None = None
    if signal is not None:
        signal_task = asyncio.ensure_future(signal.wait())
        waiters.add(signal_task)
    timeout = timeout_ms / 1000 if timeout_ms is not None else None

    try:
        done, _pending = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        task.cancel()
        if signal_task is not None:
            signal_task.cancel()
        raise

    if signal_task is not None:
        signal_task.cancel()
    if task in done:
        return task.result()

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    if signal_task is not None and signal_task in done:
        raise RequestAborted("request aborted")
    raise httpx.TimeoutException(f"request timed out after {timeout_ms} ms")


class RawClient:
    """Path-template based access to the REST API over a configured ``httpx`` client."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def request(
        self,
        method: str,
        path: str,
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any | None = None,
        options: RequestOptions | None = None,
    ) -> Any:
        url = expand_path(path, path_params)
        headers = dict(options.headers) if options and options.headers else None
        with track_request(method, path):
            response = await send_with_cancellation(
                self._http.request(
                    method,
                    url,
                    params=serialize_query(query),
                    json=body,
                    headers=headers,
                ),
                options,
            )
        return decode_body(response)

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()
