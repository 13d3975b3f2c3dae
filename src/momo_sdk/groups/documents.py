"""Document ingestion, multipart upload and document management."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Union

from ..envelope import Data, Failure, decode_envelope
from ..instrumentation import get_correlation_id, logger, track_request
from ..middleware import error_from_response, resolve_api_key
from ..raw import decode_body, send_with_cancellation
from ._base import ResourceGroup, clean_body

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from ..client import MomoClientConfig
    from ..options import RequestOptions
    from ..raw import RawClient
    from ..types import (
        BatchCreateDocumentResponse,
        BatchDocumentItem,
        CreateDocumentResponse,
        DocumentListResponse,
        DocumentResponse,
        IngestionStatusResponse,
    )

UPLOAD_PATH = "/api/v1/documents:upload"

FileContent = Union[bytes, IO[bytes]]


class DocumentsGroup(ResourceGroup):
    def __init__(self, raw: RawClient, config: MomoClientConfig, upload_http: httpx.AsyncClient) -> None:
        super().__init__(raw, config)
        self._upload_http = upload_http

    async def create(
        self,
        *,
        content: str,
        container_tag: str | None = None,
        content_type: str | None = None,
        custom_id: str | None = None,
        extract_memories: bool | None = None,
        metadata: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> CreateDocumentResponse:
        """Queue a text document for ingestion."""

        body = clean_body(
            {
                "content": content,
                "containerTag": self._container_tag(container_tag),
                "contentType": content_type,
                "customId": custom_id,
                "extractMemories": extract_memories,
                "metadata": metadata or {},
            }
        )
        return await self._raw.post("/api/v1/documents", body=body, options=options)

    async def batch_create(
        self,
        *,
        documents: Iterable[BatchDocumentItem],
        container_tag: str | None = None,
        metadata: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> BatchCreateDocumentResponse:
        body = clean_body(
            {
                "documents": list(documents),
                "containerTag": self._container_tag(container_tag),
                "metadata": metadata or {},
            }
        )
        return await self._raw.post("/api/v1/documents:batch", body=body, options=options)

    async def upload(
        self,
        file: FileContent,
        *,
        filename: str | None = None,
        container_tag: str | None = None,
        metadata: str | dict[str, Any] | None = None,
        extract_memories: bool | None = None,
        content_type: str | None = None,
        options: RequestOptions | None = None,
    ) -> CreateDocumentResponse:
        """Upload a file as a multipart form.

        The upload goes straight to the HTTP transport rather than through the
        raw client's middleware, so authentication and envelope handling are
        applied here with the same rules.
        """

        fields: dict[str, str] = {}
        tag = self._container_tag(container_tag)
        if tag:
            fields["containerTag"] = tag
        if metadata:
            fields["metadata"] = metadata if isinstance(metadata, str) else json.dumps(metadata)
        if extract_memories is not None:
            fields["extractMemories"] = "true" if extract_memories else "false"
        if content_type:
            fields["contentType"] = content_type

        headers = dict(options.headers) if options and options.headers else {}
        key = await resolve_api_key(self._config.api_key, self._config.get_api_key)
        if key:
            headers["Authorization"] = f"Bearer {key}"
        correlation_id = get_correlation_id()
        if correlation_id:
            headers.setdefault("X-Correlation-ID", correlation_id)

        files = {"file": (filename or "blob", file, content_type or "application/octet-stream")}
        with track_request("POST", UPLOAD_PATH):
            response = await send_with_cancellation(
                self._upload_http.post(UPLOAD_PATH, data=fields, files=files, headers=headers),
                options,
            )

            envelope = decode_envelope(response.content)
            if not response.is_success or isinstance(envelope, Failure):
                error = error_from_response(response, envelope, path=UPLOAD_PATH, method="POST")
                logger.warning(
                    "momo.request_failed",
                    status_code=error.status,
                    code=error.code,
                    method=error.method,
                    path=error.path,
                    correlation_id=correlation_id,
                )
                raise error
        if isinstance(envelope, Data):
            return envelope.value
        return decode_body(response)

    async def upload_from_path(
        self,
        file_path: str | Path,
        *,
        container_tag: str | None = None,
        metadata: str | dict[str, Any] | None = None,
        extract_memories: bool | None = None,
        content_type: str | None = None,
        options: RequestOptions | None = None,
    ) -> CreateDocumentResponse:
        """Read ``file_path`` and upload it under its base name."""

        path = Path(file_path)
        content = await asyncio.to_thread(path.read_bytes)
        return await self.upload(
            content,
            filename=path.name,
            container_tag=container_tag,
            metadata=metadata,
            extract_memories=extract_memories,
            content_type=content_type,
            options=options,
        )

    async def get(self, document_id: str, *, options: RequestOptions | None = None) -> DocumentResponse:
        return await self._raw.get(
            "/api/v1/documents/{documentId}",
            path_params={"documentId": document_id},
            options=options,
        )

    async def update(
        self,
        document_id: str,
        *,
        title: str | None = None,
        container_tags: Iterable[str] | None = None,
        metadata: dict[str, Any] | None = None,
        options: RequestOptions | None = None,
    ) -> DocumentResponse:
        body = clean_body(
            {
                "title": title,
                "containerTags": list(container_tags) if container_tags is not None else None,
                "metadata": metadata or {},
            }
        )
        return await self._raw.patch(
            "/api/v1/documents/{documentId}",
            path_params={"documentId": document_id},
            body=body,
            options=options,
        )

    async def delete(self, document_id: str, *, options: RequestOptions | None = None) -> None:
        await self._raw.delete(
            "/api/v1/documents/{documentId}",
            path_params={"documentId": document_id},
            options=options,
        )

    async def list(
        self,
        *,
        container_tags: Iterable[str] | None = None,
        limit: int | None = None,
        cursor: str | None = None,
        options: RequestOptions | None = None,
    ) -> DocumentListResponse:
        return await self._raw.get(
            "/api/v1/documents",
            query={
                "containerTags": list(container_tags) if container_tags is not None else None,
                "limit": limit,
                "cursor": cursor,
            },
            options=options,
        )

    async def get_ingestion_status(
        self, ingestion_id: str, *, options: RequestOptions | None = None
    ) -> IngestionStatusResponse:
        """Poll the ingestion job created by ``create`` or ``upload``."""

        return await self._raw.get(
            "/api/v1/ingestions/{ingestionId}",
            path_params={"ingestionId": ingestion_id},
            options=options,
        )
