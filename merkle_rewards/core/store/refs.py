from __future__ import annotations

from dataclasses import dataclass


def _check_segment(segment: str) -> str:
    segment = str(segment)
    if not segment or "/" in segment:
        raise ValueError(f"Invalid document path segment: {segment!r}")
    return segment


@dataclass(frozen=True)
class CollectionRef:
    path: str

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def doc(self, doc_id: str | int) -> DocumentRef:
        return DocumentRef(f"{self.path}/{_check_segment(str(doc_id))}")


@dataclass(frozen=True)
class DocumentRef:
    path: str

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> CollectionRef:
        return CollectionRef(self.path.rsplit("/", 1)[0])

    def collection(self, name: str) -> CollectionRef:
        return CollectionRef(f"{self.path}/{_check_segment(name)}")


def collection(name: str) -> CollectionRef:
    return CollectionRef(_check_segment(name))
