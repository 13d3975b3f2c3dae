"""Exceptions raised by the Momo SDK."""

from __future__ import annotations

from typing import Literal

import httpx

ErrorCode = Literal[
    "invalid_request",
    "unauthorized",
    "not_found",
    "conflict",
    "internal_error",
    "not_implemented",
]

ERROR_CODES: tuple[str, ...] = (
    "invalid_request",
    "unauthorized",
    "not_found",
    "conflict",
    "internal_error",
    "not_implemented",
)


def status_to_error_code(status: int) -> ErrorCode:
    """Map an HTTP status onto the closed error taxonomy."""

    if status == 400:
        return "invalid_request"
    if status in (401, 403):
        return "unauthorized"
    if status == 404:
        return "not_found"
    if status == 409:
        return "conflict"
    if status == 501:
        return "not_implemented"
    return "internal_error"


class MomoError(RuntimeError):
    """Raised when the Momo server answers with a failure status or error envelope."""

    def __init__(
        self,
        *,
        status: int,
        code: ErrorCode | str,
        message: str,
        path: str | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.path = path
        self.method = method

    def __repr__(self) -> str:
        return (
            f"MomoError(status={self.status!r}, code={self.code!r}, "
            f"message={self.message!r}, path={self.path!r}, method={self.method!r})"
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "path": self.path,
            "method": self.method,
        }


class RequestAborted(httpx.RequestError):
    """Raised when a caller-supplied abort signal fires before the response arrives."""


class ConfigError(ValueError):
    """Raised when a plugin config string references an unset environment variable."""

    def __init__(self, variable: str) -> None:
        super().__init__(f"Environment variable {variable} is not set")
        self.variable = variable
