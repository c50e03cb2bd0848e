"""Document version entity - immutable snapshot of a manual save."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from quillsync.domain.value_objects import ContentMetrics


@dataclass(frozen=True)
class DocumentVersion:
    """Point-in-time copy of a document's content and metrics."""

    id: UUID
    document_id: UUID
    content: Any
    derived_text: str
    word_count: int
    character_count: int
    page_count: int
    size_bytes: int
    created_at: datetime
    is_autosave: bool = False
    change_description: str | None = None

    @classmethod
    def snapshot(
        cls,
        *,
        id: UUID,
        document_id: UUID,
        content: Any,
        metrics: ContentMetrics,
        created_at: datetime,
        change_description: str | None = None,
    ) -> "DocumentVersion":
        return cls(
            id=id,
            document_id=document_id,
            content=content,
            derived_text=metrics.derived_text,
            word_count=metrics.word_count,
            character_count=metrics.character_count,
            page_count=metrics.page_count,
            size_bytes=metrics.size_bytes,
            created_at=created_at,
            is_autosave=False,
            change_description=change_description,
        )
