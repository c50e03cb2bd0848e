"""Semantic index port - external upsert/search capability."""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass
class IndexHit:
    """One document-level match returned by the index."""

    remote_id: str
    stable_key: str | None
    score: float
    title: str | None = None
    chunks: list[str] = field(default_factory=list)


class SemanticIndex(Protocol):
    """Port for the external semantic index.

    ``upsert`` keys on ``stable_key`` so racing creates collapse into one remote
    record. Adapters raise ``SemanticIndexError`` on any remote failure and
    return normally from ``delete`` when the record is already gone.
    """

    @property
    def enabled(self) -> bool: ...

    async def upsert(
        self,
        *,
        stable_key: str,
        text: str,
        metadata: dict[str, str | int | bool],
        group_tag: str,
        remote_id: str | None = None,
    ) -> str: ...

    async def delete(self, remote_id: str) -> None: ...

    async def search(self, query: str, *, group_tag: str, limit: int = 10) -> list[IndexHit]: ...
