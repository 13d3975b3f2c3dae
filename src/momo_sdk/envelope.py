"""Tagged decoding of the server's ``{data}`` / ``{error}`` response envelope."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class Data:
    """Body was an object carrying a ``data`` key."""

    value: Any


@dataclass(frozen=True, slots=True)
class Failure:
    """Body was an object carrying a truthy ``error``.

    ``code`` and ``message`` are only filled when ``error`` is an object
    holding them as non-empty strings.
    """

    code: str | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class Bare:
    """Body had no envelope, or was not JSON at all."""

    body: Any = None
    is_json: bool = False


Envelope = Union[Data, Failure, Bare]


def _is_set(value: Any) -> bool:
    # Objects and arrays count as set even when empty.
    return isinstance(value, (dict, list)) or bool(value)


def _failure(error: Any) -> Failure:
    if not isinstance(error, dict):
        return Failure()
    code = error.get("code")
    message = error.get("message")
    return Failure(
        code=code if isinstance(code, str) and code else None,
        message=message if isinstance(message, str) and message else None,
    )


def decode_envelope(content: bytes, *, prefer_data: bool = False) -> Envelope:
    """Classify a raw response body.

    A set ``error`` wins over ``data`` unless ``prefer_data`` is given; the
    middleware passes it for 2xx responses, where a ``data`` key alone
    decides.
    """

    if not content:
        return Bare()
    try:
        body = json.loads(content)
    except ValueError:
        return Bare()
    if isinstance(body, dict):
        if prefer_data and "data" in body:
            return Data(body["data"])
        error = body.get("error")
        if _is_set(error):
            return _failure(error)
        if "data" in body:
            return Data(body["data"])
    return Bare(body, is_json=True)
