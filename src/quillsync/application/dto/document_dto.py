"""Document DTOs."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from quillsync.domain.entities import Document, DocumentVersion


@dataclass
class DocumentCreateInput:
    """Input for creating a document."""

    title: str
    content: Any


@dataclass
class DocumentUpdateInput:
    """Input for updating a document. ``None`` leaves a field unchanged."""

    title: str | None = None
    content: Any = None
    is_autosave: bool = False


@dataclass
class DocumentOutput:
    """Public view of a document. Sync bookkeeping is never exposed."""

    id: UUID
    title: str
    content: Any
    derived_text: str
    word_count: int
    character_count: int
    page_count: int
    created_at: datetime
    updated_at: datetime
    last_edited_at: datetime

    @classmethod
    def from_entity(cls, document: Document) -> "DocumentOutput":
        return cls(
            id=document.id,
            title=document.title,
            content=document.content,
            derived_text=document.derived_text,
            word_count=document.word_count,
            character_count=document.character_count,
            page_count=document.page_count,
            created_at=document.created_at,
            updated_at=document.updated_at,
            last_edited_at=document.last_edited_at,
        )


@dataclass
class DocumentPage:
    """One page of an owner's documents."""

    items: list[DocumentOutput]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass
class ArchiveOutput:
    """Result of archiving a document."""

    success: bool


@dataclass
class DocumentVersionOutput:
    """Read-only view of a snapshot."""

    id: UUID
    document_id: UUID
    content: Any
    derived_text: str
    word_count: int
    character_count: int
    page_count: int
    created_at: datetime
    is_autosave: bool

    @classmethod
    def from_entity(cls, version: DocumentVersion) -> "DocumentVersionOutput":
        return cls(
            id=version.id,
            document_id=version.document_id,
            content=version.content,
            derived_text=version.derived_text,
            word_count=version.word_count,
            character_count=version.character_count,
            page_count=version.page_count,
            created_at=version.created_at,
            is_autosave=version.is_autosave,
        )
