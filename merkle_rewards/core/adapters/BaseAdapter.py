from __future__ import annotations

import asyncio
from abc import ABC
from typing import Any

from loguru import logger

from merkle_rewards.core.clients.protocols import DocumentStore
from merkle_rewards.core.config import get_store_timeout_s
from merkle_rewards.core.errors import DocumentStoreError
from merkle_rewards.core.store.refs import CollectionRef, DocumentRef


class BaseAdapter(ABC):
    adapter_type: str | None = None

    def __init__(
        self,
        name: str,
        config: dict[str, Any] | None = None,
        *,
        store: DocumentStore,
    ):
        self.name = name
        self.config = config or {}
        self.store = store
        self.logger = logger.bind(adapter=self.__class__.__name__)

    @property
    def store_timeout_s(self) -> float:
        value = self.config.get("store_timeout_s")
        return float(value) if value else get_store_timeout_s()

    async def _get_document(self, ref: DocumentRef) -> dict[str, Any] | None:
        try:
            async with asyncio.timeout(self.store_timeout_s):
                return await self.store.get(ref)
        except TimeoutError as exc:
            raise DocumentStoreError(
                ref.path, f"Document store read timed out for {ref.path}"
            ) from exc
        except Exception as exc:
            raise DocumentStoreError(ref.path) from exc

    async def _query_documents(
        self, coll: CollectionRef, field: str, value: Any
    ) -> list[dict[str, Any]]:
        try:
            async with asyncio.timeout(self.store_timeout_s):
                return await self.store.query(coll, field, value)
        except TimeoutError as exc:
            raise DocumentStoreError(
                coll.path, f"Document store query timed out for {coll.path}"
            ) from exc
        except Exception as exc:
            raise DocumentStoreError(coll.path) from exc

    async def _list_documents(self, coll: CollectionRef) -> list[dict[str, Any]]:
        try:
            async with asyncio.timeout(self.store_timeout_s):
                return await self.store.get_collection(coll)
        except TimeoutError as exc:
            raise DocumentStoreError(
                coll.path, f"Document store read timed out for {coll.path}"
            ) from exc
        except Exception as exc:
            raise DocumentStoreError(coll.path) from exc

    async def close(self) -> None:
        pass
