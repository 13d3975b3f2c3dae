"""Conversation transcript ingestion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._base import ResourceGroup, clean_body

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..options import RequestOptions
    from ..types import ConversationIngestResponse, ConversationMessage, V1MemoryType


class ConversationsGroup(ResourceGroup):
    async def ingest(
        self,
        *,
        messages: Iterable[ConversationMessage],
        container_tag: str | None = None,
        session_id: str | None = None,
        memory_type: V1MemoryType | None = None,
        options: RequestOptions | None = None,
    ) -> ConversationIngestResponse:
        """Extract memories from a conversation transcript."""

        body = clean_body(
            {
                "messages": list(messages),
                "containerTag": self._required_container_tag(container_tag),
                "sessionId": session_id,
                "memoryType": memory_type,
            }
        )
        return await self._raw.post("/api/v1/conversations:ingest", body=body, options=options)
