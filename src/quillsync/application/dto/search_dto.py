"""Search DTOs."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class SearchInput:
    """Input for document search."""

    query: str
    limit: int = 10


@dataclass
class SearchResult:
    """Owner document matched by a search."""

    document_id: UUID
    title: str
    score: float
    word_count: int
    updated_at: datetime
    matched_chunks: list[str] = field(default_factory=list)
