from __future__ import annotations

import copy
from typing import Any

from merkle_rewards.core.store.refs import CollectionRef, DocumentRef


def get_field(data: dict[str, Any], field: str) -> Any:
    """Resolve a dotted field path such as ``owner.address``."""
    cur: Any = data
    for part in field.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


class InMemoryDocumentStore:
    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = {
            path: copy.deepcopy(doc) for path, doc in (documents or {}).items()
        }

    async def get(self, ref: DocumentRef) -> dict[str, Any] | None:
        doc = self._documents.get(ref.path)
        return copy.deepcopy(doc) if doc is not None else None

    def _children(self, coll: CollectionRef) -> list[dict[str, Any]]:
        prefix = f"{coll.path}/"
        return [
            self._documents[path]
            for path in sorted(self._documents)
            if path.startswith(prefix) and "/" not in path[len(prefix) :]
        ]

    async def get_collection(self, coll: CollectionRef) -> list[dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._children(coll)]

    async def query(
        self, coll: CollectionRef, field: str, value: Any
    ) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(doc)
            for doc in self._children(coll)
            if get_field(doc, field) == value
        ]

    async def set(self, ref: DocumentRef, data: dict[str, Any]) -> None:
        self._documents[ref.path] = copy.deepcopy(data)
