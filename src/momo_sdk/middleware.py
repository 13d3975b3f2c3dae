"""Request/response middleware wrapped around the raw client's transport.

Every request issued through :class:`~momo_sdk.raw.RawClient` passes through
two hooks, in order:

* an authentication hook that resolves the API key (static or via an async
  getter) and injects ``Authorization: Bearer <key>``;
* an envelope hook that turns failure responses into :class:`MomoError` and
  strips the ``{"data": ...}`` wrapper from successful ones.

The hooks live in a transport rather than in ``httpx`` event hooks because the
envelope hook needs to replace the response body, which event hooks cannot do.
"""

from __future__ import annotations

import inspect
import json
from typing import TYPE_CHECKING, Awaitable, Callable, Union

import httpx

from .envelope import Bare, Data, Failure, decode_envelope
from .errors import MomoError, status_to_error_code
from .instrumentation import get_correlation_id, logger

if TYPE_CHECKING:
    from .envelope import Envelope

ApiKeyGetter = Callable[[], Union[str, None, Awaitable[Union[str, None]]]]

# Headers describing the original body; they no longer hold once it is rewritten.
_BODY_HEADERS = ("content-length", "content-encoding", "transfer-encoding")


async def resolve_api_key(api_key: str | None, get_api_key: ApiKeyGetter | None) -> str | None:
    """Return the key to send, or ``None`` when no header should be added.

    A configured getter is always consulted and its answer is final; the
    static key is only used when there is no getter.
    """

    if get_api_key is not None:
        key = get_api_key()
        if inspect.isawaitable(key):
            key = await key
        return key or None
    return api_key or None


def error_from_response(
    response: httpx.Response,
    envelope: Envelope,
    *,
    path: str,
    method: str,
) -> MomoError:
    status = response.status_code
    code = None
    message = None
    if isinstance(envelope, Failure):
        code = envelope.code
        message = envelope.message
    return MomoError(
        status=status,
        code=code or status_to_error_code(status),
        message=message or response.reason_phrase,
        path=path,
        method=method,
    )


def unwrapped_response(
    request: httpx.Request, response: httpx.Response, value: object
) -> httpx.Response:
    """Build a response carrying only ``value`` with the original status and headers."""

    headers = [
        (name, header_value)
        for name, header_value in response.headers.multi_items()
        if name.lower() not in _BODY_HEADERS
    ]
    return httpx.Response(
        response.status_code,
        headers=headers,
        content=json.dumps(value).encode("utf-8"),
        request=request,
        extensions=response.extensions,
    )


class MiddlewareTransport(httpx.AsyncBaseTransport):
    """Transport applying the auth and envelope hooks around ``inner``."""

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        *,
        api_key: str | None = None,
        get_api_key: ApiKeyGetter | None = None,
    ) -> None:
        self._inner = inner
        self._api_key = api_key
        self._get_api_key = get_api_key

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await self.on_request(request)
        response = await self._inner.handle_async_request(request)
        return await self.on_response(request, response)

    async def on_request(self, request: httpx.Request) -> None:
        key = await resolve_api_key(self._api_key, self._get_api_key)
        if key:
            request.headers["Authorization"] = f"Bearer {key}"
        correlation_id = get_correlation_id()
        if correlation_id and "X-Correlation-ID" not in request.headers:
            request.headers["X-Correlation-ID"] = correlation_id

    async def on_response(self, request: httpx.Request, response: httpx.Response) -> httpx.Response:
        await response.aread()
        envelope = decode_envelope(response.content, prefer_data=response.is_success)

        if not response.is_success:
            await response.aclose()
            error = error_from_response(
                response, envelope, path=request.url.path, method=request.method
            )
            logger.warning(
                "momo.request_failed",
                status_code=error.status,
                code=error.code,
                method=error.method,
                path=error.path,
                correlation_id=get_correlation_id(),
            )
            raise error

        if isinstance(envelope, Data):
            await response.aclose()
            return unwrapped_response(request, response, envelope.value)

        if isinstance(envelope, Bare) and not envelope.is_json and response.content:
            logger.debug("momo.non_json_response", path=request.url.path, method=request.method)
        return response

    async def aclose(self) -> None:
        # The inner transport is shared with the upload client, which owns it.
        return None
