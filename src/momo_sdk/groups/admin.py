"""Administrative jobs (forgetting runs)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._base import ResourceGroup

if TYPE_CHECKING:
    from ..options import RequestOptions
    from ..types import ForgettingRunResponse


class AdminGroup(ResourceGroup):
    async def run_forgetting(self, *, options: RequestOptions | None = None) -> ForgettingRunResponse:
        """Trigger one pass of the server-side forgetting job."""

        return await self._raw.post("/api/v1/admin/forgetting:run", options=options)
