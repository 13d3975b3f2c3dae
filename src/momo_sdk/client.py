"""Asynchronous client for the Momo REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

from .config import DEFAULT_TIMEOUT, Settings
from .groups import (
    AdminGroup,
    ConversationsGroup,
    DocumentsGroup,
    GraphGroup,
    HealthGroup,
    MemoriesGroup,
    ProfileGroup,
    SearchGroup,
)
from .instrumentation import logger
from .middleware import ApiKeyGetter, MiddlewareTransport
from .raw import RawClient

if TYPE_CHECKING:
    from .plugin_config import ResolvedPluginConfig


@dataclass(slots=True)
class MomoClientConfig:
    """Connection settings shared by every resource group of a client."""

    base_url: str
    api_key: str | None = None
    get_api_key: ApiKeyGetter | None = None
    default_container_tag: str | None = None
    transport: httpx.AsyncBaseTransport | None = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        base = (self.base_url or "").rstrip("/")
        if not base:
            raise ValueError("MomoClient requires a base_url")
        self.base_url = base


class MomoClient:
    """Entry point of the SDK.

    Resource methods are grouped by attribute (``client.documents``,
    ``client.search`` ...). Use it as an async context manager, or call
    :meth:`aclose` when done::

        async with MomoClient(base_url="http://localhost:3000", api_key="key") as momo:
            hits = await momo.search.search(q="collateral")
    """

    def __init__(
        self,
        config: MomoClientConfig | None = None,
        /,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = MomoClientConfig(**kwargs)
        elif kwargs:
            raise TypeError("pass either a MomoClientConfig or keyword arguments, not both")
        self.config = config

        inner = config.transport or httpx.AsyncHTTPTransport()
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            headers={"Accept": "application/json"},
            transport=MiddlewareTransport(
                inner, api_key=config.api_key, get_api_key=config.get_api_key
            ),
        )
        # Multipart uploads talk to the transport directly, bypassing the middleware.
        self._upload_http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            headers={"Accept": "application/json"},
            transport=inner,
        )
        self.raw = RawClient(self._http)

        self.documents = DocumentsGroup(self.raw, config, self._upload_http)
        self.memories = MemoriesGroup(self.raw, config)
        self.search = SearchGroup(self.raw, config)
        self.graph = GraphGroup(self.raw, config)
        self.conversations = ConversationsGroup(self.raw, config)
        self.profile = ProfileGroup(self.raw, config)
        self.admin = AdminGroup(self.raw, config)
        self.health = HealthGroup(self.raw, config)
        logger.debug("momo.client_created", base_url=config.base_url)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> MomoClient:
        """Build a client from ``MOMO_*`` environment settings."""

        settings = settings or Settings.from_env()
        params: dict[str, Any] = {
            "base_url": settings.base_url,
            "api_key": settings.api_key,
            "default_container_tag": settings.container_tag,
            "timeout": settings.timeout,
        }
        params.update(overrides)
        return cls(MomoClientConfig(**params))

    @classmethod
    def from_plugin_config(cls, plugin_config: ResolvedPluginConfig, **overrides: Any) -> MomoClient:
        """Build a client from a resolved plugin configuration."""

        params: dict[str, Any] = {
            "base_url": plugin_config.base_url,
            "api_key": plugin_config.api_key,
            "default_container_tag": getattr(plugin_config, "container_tag", None),
        }
        params.update(overrides)
        return cls(MomoClientConfig(**params))

    async def aclose(self) -> None:
        await self._http.aclose()
        await self._upload_http.aclose()

    async def __aenter__(self) -> MomoClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
