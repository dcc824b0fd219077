from __future__ import annotations

from typing import Any, Protocol

from merkle_rewards.core.store.refs import CollectionRef, DocumentRef


class DocumentStore(Protocol):
    async def get(self, ref: DocumentRef) -> dict[str, Any] | None: ...

    async def get_collection(self, coll: CollectionRef) -> list[dict[str, Any]]: ...

    async def query(
        self, coll: CollectionRef, field: str, value: Any
    ) -> list[dict[str, Any]]: ...

    async def set(self, ref: DocumentRef, data: dict[str, Any]) -> None: ...


class ClaimedAmountProvider(Protocol):
    def get_distributor_address(self, chain_id: int) -> str: ...

    async def get_cumulative_claimed(
        self,
        chain_id: int,
        distributor_address: str,
        denomination: str,
        user_address: str,
    ) -> str: ...
