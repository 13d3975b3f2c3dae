"""Memory and container relationship graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._base import ResourceGroup

if TYPE_CHECKING:
    from ..options import RequestOptions
    from ..types import GraphResponse


class GraphGroup(ResourceGroup):
    async def get_memory_graph(
        self,
        memory_id: str,
        *,
        depth: int | None = None,
        max_nodes: int | None = None,
        relation_types: str | None = None,
        options: RequestOptions | None = None,
    ) -> GraphResponse:
        """Return the relation graph around a single memory."""

        return await self._raw.get(
            "/api/v1/memories/{memoryId}/graph",
            path_params={"memoryId": memory_id},
            query={"depth": depth, "maxNodes": max_nodes, "relationTypes": relation_types},
            options=options,
        )

    async def get_container_graph(
        self,
        tag: str,
        *,
        max_nodes: int | None = None,
        options: RequestOptions | None = None,
    ) -> GraphResponse:
        """Return the relation graph of every memory under a container tag."""

        return await self._raw.get(
            "/api/v1/containers/{tag}/graph",
            path_params={"tag": tag},
            query={"maxNodes": max_nodes},
            options=options,
        )
