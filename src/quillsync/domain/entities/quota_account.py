"""Quota account entity - per-owner ceilings and running totals."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class QuotaDefaults:
    """Ceilings applied to lazily created accounts."""

    max_documents: int = 10
    max_document_size_bytes: int = 1_048_576
    max_document_pages: int = 10


@dataclass
class QuotaAccount:
    """One row per owner."""

    owner_id: str
    max_documents: int
    max_document_size_bytes: int
    max_document_pages: int
    current_document_count: int
    total_storage_used_bytes: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def with_defaults(cls, owner_id: str, defaults: QuotaDefaults, now: datetime) -> "QuotaAccount":
        return cls(
            owner_id=owner_id,
            max_documents=defaults.max_documents,
            max_document_size_bytes=defaults.max_document_size_bytes,
            max_document_pages=defaults.max_document_pages,
            current_document_count=0,
            total_storage_used_bytes=0,
            created_at=now,
            updated_at=now,
        )

    @property
    def document_limit_remaining(self) -> int:
        return max(0, self.max_documents - self.current_document_count)
