"""Wire shapes of the Momo REST API.

These mirror the server's OpenAPI schemas. Responses are plain dicts at
runtime; the ``TypedDict`` declarations only document and type them.
"""

from __future__ import annotations

from typing import Any, Literal, TypedDict

SearchScope = Literal["hybrid", "documents", "memories"]
V1MemoryType = Literal["fact", "preference", "episode"]
V1DocumentType = Literal["text", "pdf", "webpage", "image", "video", "audio", "markdown", "code"]


class ResponseMeta(TypedDict, total=False):
    cursor: str | None
    total: int | None


class CreateDocumentResponse(TypedDict, total=False):
    id: str
    ingestionId: str


class BatchCreateDocumentResponse(TypedDict, total=False):
    documents: list[CreateDocumentResponse]


class BatchDocumentItem(TypedDict, total=False):
    content: str
    contentType: str
    customId: str
    metadata: dict[str, Any]


class DocumentResponse(TypedDict, total=False):
    id: str
    title: str | None
    content: str | None
    docType: V1DocumentType
    containerTags: list[str]
    metadata: dict[str, Any]
    createdAt: str
    updatedAt: str


class DocumentSummaryResponse(TypedDict, total=False):
    id: str
    title: str | None
    docType: V1DocumentType
    containerTags: list[str]
    createdAt: str
    updatedAt: str


class DocumentListResponse(TypedDict, total=False):
    documents: list[DocumentSummaryResponse]
    meta: ResponseMeta


class IngestionStatusResponse(TypedDict, total=False):
    id: str
    status: str
    error: str | None


class MemoryResponse(TypedDict, total=False):
    id: str
    content: str
    containerTag: str
    memoryType: V1MemoryType
    isStatic: bool
    metadata: dict[str, Any]
    createdAt: str
    updatedAt: str


class MemoryListResponse(TypedDict, total=False):
    memories: list[MemoryResponse]
    meta: ResponseMeta


class UpdateMemoryResponse(TypedDict, total=False):
    id: str
    previousId: str | None
    content: str


class ForgetMemoryResponse(TypedDict, total=False):
    id: str
    forgotten: bool


class ForgettingRunResponse(TypedDict, total=False):
    forgotten: int


class SearchInclude(TypedDict, total=False):
    documents: bool
    chunks: bool


class SearchResultItem(TypedDict, total=False):
    id: str
    content: str
    score: float
    kind: str
    metadata: dict[str, Any]


class SearchResponse(TypedDict, total=False):
    results: list[SearchResultItem]
    total: int
    timingMs: float


class GraphResponse(TypedDict, total=False):
    nodes: list[dict[str, Any]]
    links: list[dict[str, Any]]


class ConversationMessage(TypedDict, total=False):
    role: str
    content: str


class ConversationIngestResponse(TypedDict, total=False):
    memoriesExtracted: int
    documentId: str | None


class ProfileResponse(TypedDict, total=False):
    static: list[str]
    dynamic: list[str]
    narrative: str | None


class HealthComponent(TypedDict, total=False):
    status: str


class HealthData(TypedDict, total=False):
    status: str
    version: str
    uptime: float
    database: HealthComponent
