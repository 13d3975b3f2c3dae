"""Memory CRUD and forgetting."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._base import ResourceGroup, clean_body

if TYPE_CHECKING:
    from ..options import RequestOptions
    from ..types import (
        ForgetMemoryResponse,
        MemoryListResponse,
        MemoryResponse,
        UpdateMemoryResponse,
        V1MemoryType,
    )


class MemoriesGroup(ResourceGroup):
    async def create(
        self,
        *,
        content: str,
        container_tag: str | None = None,
        memory_type: V1MemoryType | None = None,
        metadata: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> MemoryResponse:
        body = clean_body(
            {
                "content": content,
                "containerTag": self._required_container_tag(container_tag),
                "memoryType": memory_type,
                "metadata": metadata or {},
            }
        )
        return await self._raw.post("/api/v1/memories", body=body, options=options)

    async def get(self, memory_id: str, *, options: RequestOptions | None = None) -> MemoryResponse:
        return await self._raw.get(
            "/api/v1/memories/{memoryId}",
            path_params={"memoryId": memory_id},
            options=options,
        )

    async def update(
        self,
        memory_id: str,
        *,
        content: str,
        is_static: bool | None = None,
        metadata: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> UpdateMemoryResponse:
        """Replace a memory's content. The server versions the old content."""

        body = clean_body(
            {
                "content": content,
                "isStatic": is_static,
                "metadata": metadata or {},
            }
        )
        return await self._raw.patch(
            "/api/v1/memories/{memoryId}",
            path_params={"memoryId": memory_id},
            body=body,
            options=options,
        )

    async def list(
        self,
        *,
        container_tag: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
        options: RequestOptions | None = None,
    ) -> MemoryListResponse:
        return await self._raw.get(
            "/api/v1/memories",
            query={
                "containerTag": self._container_tag(container_tag),
                "limit": limit,
                "cursor": cursor,
            },
            options=options,
        )

    async def forget(
        self,
        *,
        content: str,
        container_tag: str | None = None,
        reason: str | None = None,
        options: RequestOptions | None = None,
    ) -> ForgetMemoryResponse:
        """Forget the memory best matching ``content`` within a container."""

        body = clean_body(
            {
                "content": content,
                "containerTag": self._required_container_tag(container_tag),
                "reason": reason,
            }
        )
        return await self._raw.post("/api/v1/memories:forget", body=body, options=options)

    async def forget_by_id(
        self,
        memory_id: str,
        *,
        reason: str | None = None,
        options: RequestOptions | None = None,
    ) -> ForgetMemoryResponse:
        return await self._raw.delete(
            "/api/v1/memories/{memoryId}",
            path_params={"memoryId": memory_id},
            body=clean_body({"reason": reason}),
            options=options,
        )
