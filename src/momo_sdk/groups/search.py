"""Hybrid search across documents and memories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._base import ResourceGroup, clean_body

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..options import RequestOptions
    from ..types import SearchInclude, SearchResponse, SearchScope


class SearchGroup(ResourceGroup):
    async def search(
        self,
        *,
        q: str,
        container_tags: Iterable[str] | None = None,
        limit: int | None = None,
        threshold: float | None = None,
        scope: SearchScope | None = None,
        rerank: bool | None = None,
        include: SearchInclude | None = None,
        options: RequestOptions | None = None,
    ) -> SearchResponse:
        """Hybrid search over documents and memories.

        Without ``container_tags`` the search is scoped to the client's
        default container tag, if one is configured.
        """

        if container_tags is not None:
            tags: list[str] | None = list(container_tags)
        elif self._config.default_container_tag:
            tags = [self._config.default_container_tag]
        else:
            tags = None
        body = clean_body(
            {
                "q": q,
                "containerTags": tags,
                "limit": limit,
                "threshold": threshold,
                "scope": scope,
                "rerank": rerank,
                "include": include,
            }
        )
        return await self._raw.post("/api/v1/search", body=body, options=options)
