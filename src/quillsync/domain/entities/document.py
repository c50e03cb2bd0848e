"""Document entity."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any
from uuid import UUID

from quillsync.domain.value_objects import ContentMetrics, SyncState


@dataclass
class Document:
    """Rich-text document with derived metrics and semantic index bookkeeping.

    ``content`` is canonical. The derived fields are written only through
    ``with_content`` so they always equal ``ContentMetrics.from_content(content)``.
    """

    id: UUID
    owner_id: str
    title: str
    content: Any
    derived_text: str
    word_count: int
    character_count: int
    page_count: int
    size_bytes: int
    created_at: datetime
    updated_at: datetime
    last_edited_at: datetime
    archived: bool = False
    external_index_id: str | None = None
    external_index_fingerprint: str | None = None

    @classmethod
    def new(
        cls,
        *,
        id: UUID,
        owner_id: str,
        title: str,
        content: Any,
        metrics: ContentMetrics,
        now: datetime,
    ) -> "Document":
        return cls(
            id=id,
            owner_id=owner_id,
            title=title,
            content=content,
            derived_text=metrics.derived_text,
            word_count=metrics.word_count,
            character_count=metrics.character_count,
            page_count=metrics.page_count,
            size_bytes=metrics.size_bytes,
            created_at=now,
            updated_at=now,
            last_edited_at=now,
        )

    @property
    def metrics(self) -> ContentMetrics:
        return ContentMetrics(
            derived_text=self.derived_text,
            word_count=self.word_count,
            character_count=self.character_count,
            page_count=self.page_count,
            size_bytes=self.size_bytes,
        )

    @property
    def sync_state(self) -> SyncState:
        return SyncState.SYNCED if self.external_index_id else SyncState.UNSYNCED

    def with_content(
        self, content: Any, metrics: ContentMetrics, now: datetime, title: str | None = None
    ) -> "Document":
        """Copy with new content and all derived fields replaced together."""
        return replace(
            self,
            title=title if title is not None else self.title,
            content=content,
            derived_text=metrics.derived_text,
            word_count=metrics.word_count,
            character_count=metrics.character_count,
            page_count=metrics.page_count,
            size_bytes=metrics.size_bytes,
            updated_at=now,
            last_edited_at=now,
        )

    def with_title(self, title: str, now: datetime) -> "Document":
        """Metadata-only change: ``last_edited_at`` is left alone."""
        return replace(self, title=title, updated_at=now)
