"""Container profile computation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._base import ResourceGroup, clean_body

if TYPE_CHECKING:
    from ..options import RequestOptions
    from ..types import ProfileResponse


class ProfileGroup(ResourceGroup):
    async def compute(
        self,
        *,
        container_tag: str | None = None,
        q: str | None = None,
        threshold: float | None = None,
        limit: int | None = None,
        include_dynamic: bool | None = None,
        generate_narrative: bool | None = None,
        options: RequestOptions | None = None,
    ) -> ProfileResponse:
        body = clean_body(
            {
                "containerTag": self._required_container_tag(container_tag),
                "q": q,
                "threshold": threshold,
                "limit": limit,
                "includeDynamic": include_dynamic,
                "generateNarrative": generate_narrative,
            }
        )
        return await self._raw.post("/api/v1/profile:compute", body=body, options=options)
