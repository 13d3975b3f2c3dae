"""Logging setup, correlation ids and per-endpoint request statistics."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from threading import Lock
from typing import Iterator

import structlog

from .errors import MomoError

_correlation_id: ContextVar[str | None] = ContextVar("momo_correlation_id", default=None)


def _configure_structlog() -> None:
    logging.basicConfig(level=logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


_configure_structlog()

logger = structlog.get_logger("momo_sdk")


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for every request issued inside the block.

    An enclosing scope's id is reused when none is given; otherwise a fresh
    one is generated. The middleware sends it as ``X-Correlation-ID``.
    """

    bound = correlation_id or _correlation_id.get() or uuid.uuid4().hex
    token = _correlation_id.set(bound)
    try:
        yield bound
    finally:
        _correlation_id.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


@dataclass(slots=True)
class EndpointStats:
    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0
    errors: dict[str, int] = field(default_factory=dict)

    @property
    def avg_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    @property
    def error_count(self) -> int:
        return sum(self.errors.values())


class RequestStats:
    """Call counts, latency and failures keyed by ``"METHOD /path/{template}"``.

    Failures are counted per :class:`MomoError` code, or per exception class
    for transport errors such as timeouts and aborts.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._endpoints: dict[str, EndpointStats] = {}

    def observe(self, endpoint: str, duration_ms: float, *, error: str | None = None) -> None:
        with self._lock:
            stats = self._endpoints.setdefault(endpoint, EndpointStats())
            stats.count += 1
            stats.total_ms += duration_ms
            stats.max_ms = max(stats.max_ms, duration_ms)
            if error:
                stats.errors[error] = stats.errors.get(error, 0) + 1

    def snapshot(self) -> dict[str, EndpointStats]:
        with self._lock:
            return {
                endpoint: replace(stats, errors=dict(stats.errors))
                for endpoint, stats in sorted(self._endpoints.items())
            }

    def reset(self) -> None:
        with self._lock:
            self._endpoints.clear()


request_stats = RequestStats()


def _error_label(exc: BaseException) -> str:
    if isinstance(exc, MomoError):
        return str(exc.code)
    return type(exc).__name__


@contextmanager
def track_request(method: str, path: str) -> Iterator[None]:
    """Time one API call, record it in :data:`request_stats` and log ``momo.request``.

    ``path`` is the unexpanded template, so calls for different ids of the
    same endpoint aggregate together.
    """

    start = time.perf_counter()
    error: str | None = None
    try:
        yield
    except BaseException as exc:
        error = _error_label(exc)
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        request_stats.observe(f"{method} {path}", duration_ms, error=error)
        logger.info(
            "momo.request",
            method=method,
            path=path,
            latency_ms=round(duration_ms, 2),
            error=error,
            correlation_id=get_correlation_id(),
        )
