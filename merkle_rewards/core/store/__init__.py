from merkle_rewards.core.store.memory import InMemoryDocumentStore
from merkle_rewards.core.store.refs import CollectionRef, DocumentRef, collection
from merkle_rewards.core.store.sqlite import SqliteDocumentStore

__all__ = [
    "CollectionRef",
    "DocumentRef",
    "InMemoryDocumentStore",
    "SqliteDocumentStore",
    "collection",
]
