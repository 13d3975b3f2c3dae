"""Shared plumbing for the per-resource groups."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..client import MomoClientConfig
    from ..raw import RawClient


def clean_body(body: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` fields so the server applies its own defaults."""

    return {key: value for key, value in body.items() if value is not None}


class ResourceGroup:
    """Base class holding the raw client and the owning client's configuration."""

    def __init__(self, raw: RawClient, config: MomoClientConfig) -> None:
        self._raw = raw
        self._config = config

    def _container_tag(self, container_tag: str | None) -> str | None:
        if container_tag is not None:
            return container_tag
        return self._config.default_container_tag

    def _required_container_tag(self, container_tag: str | None) -> str:
        tag = self._container_tag(container_tag)
        if not tag:
            raise ValueError("container_tag is required when no default_container_tag is configured")
        return tag
