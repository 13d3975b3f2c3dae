"""Per-call request options."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True)
class RequestOptions:
    """Cancellation and extra headers for a single call.

    ``signal`` aborts the request once set; ``timeout_ms`` aborts it after the
    given number of milliseconds. With both, whichever happens first wins.
    ``headers`` are added to the request; they never remove the
    ``Authorization`` header injected by the client.
    """

    signal: asyncio.Event | None = None
    timeout_ms: float | None = None
    headers: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if self.timeout_ms is not None and self.timeout_ms < 0:
            raise ValueError("timeout_ms must be >= 0")
