"""Relative quota ledger adjustments."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerDelta:
    """Signed change applied atomically to an owner's running totals.

    Ledger counters are only ever adjusted by a delta, never overwritten with a
    previously read value.
    """

    documents: int = 0
    storage_bytes: int = 0

    @property
    def is_zero(self) -> bool:
        return self.documents == 0 and self.storage_bytes == 0

    @classmethod
    def for_creation(cls, size_bytes: int) -> "LedgerDelta":
        return cls(documents=1, storage_bytes=size_bytes)

    @classmethod
    def for_update(cls, old_size_bytes: int, new_size_bytes: int) -> "LedgerDelta":
        return cls(documents=0, storage_bytes=new_size_bytes - old_size_bytes)

    @classmethod
    def for_deletion(cls, size_bytes: int) -> "LedgerDelta":
        return cls(documents=-1, storage_bytes=-size_bytes)


@dataclass(frozen=True)
class LedgerAdjustment:
    """Outcome of applying a delta: totals before and after."""

    previous_document_count: int
    previous_storage_bytes: int
    document_count: int
    storage_bytes: int
    delta: LedgerDelta

    @property
    def clamped(self) -> bool:
        """True when a floor at zero swallowed part of the delta."""
        return (
            self.previous_document_count + self.delta.documents != self.document_count
            or self.previous_storage_bytes + self.delta.storage_bytes != self.storage_bytes
        )
