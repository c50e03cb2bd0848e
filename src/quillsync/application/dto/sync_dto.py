"""Semantic index synchronization DTOs."""

from dataclasses import dataclass
from uuid import UUID

from quillsync.domain.value_objects import SkipReason


@dataclass(frozen=True)
class SyncOptions:
    """Per-call reconciliation options."""

    force: bool = False
    include_archived: bool = False
    min_word_count: int | None = None


@dataclass
class SyncResult:
    """Outcome of one reconciliation. Failures are values, never raised."""

    document_id: UUID
    success: bool
    skipped: bool = False
    reason: SkipReason | None = None
    external_index_id: str | None = None
    error: str | None = None

    @classmethod
    def skip(
        cls, document_id: UUID, reason: SkipReason, external_index_id: str | None = None
    ) -> "SyncResult":
        return cls(
            document_id=document_id,
            success=True,
            skipped=True,
            reason=reason,
            external_index_id=external_index_id,
        )

    @classmethod
    def failure(cls, document_id: UUID, error: str) -> "SyncResult":
        return cls(document_id=document_id, success=False, error=error)

    def to_dict(self) -> dict:
        return {
            "document_id": str(self.document_id),
            "success": self.success,
            "skipped": self.skipped,
            "reason": self.reason.value if self.reason else None,
            "external_index_id": self.external_index_id,
            "error": self.error,
        }
