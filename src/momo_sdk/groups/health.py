"""Server health check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._base import ResourceGroup

if TYPE_CHECKING:
    from ..options import RequestOptions
    from ..types import HealthData


class HealthGroup(ResourceGroup):
    async def check(self, *, options: RequestOptions | None = None) -> HealthData:
        """Return server health. Works without an API key."""

        return await self._raw.get("/api/v1/health", options=options)
