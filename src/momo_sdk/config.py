"""Environment-driven settings for building a client outside a plugin."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 30.0


@dataclass(slots=True)
class Settings:
    """Client settings read from ``MOMO_*`` environment variables."""

    base_url: str = DEFAULT_BASE_URL
    api_key: str | None = None
    container_tag: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        source = os.environ if env is None else env
        timeout = source.get("MOMO_TIMEOUT")
        return cls(
            base_url=source.get("MOMO_BASE_URL") or DEFAULT_BASE_URL,
            api_key=source.get("MOMO_API_KEY") or None,
            container_tag=source.get("MOMO_CONTAINER_TAG") or None,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
        )
