"""Domain value objects."""

from quillsync.domain.value_objects.content_fingerprint import ContentFingerprint
from quillsync.domain.value_objects.content_metrics import ContentMetrics
from quillsync.domain.value_objects.ledger_delta import LedgerAdjustment, LedgerDelta
from quillsync.domain.value_objects.quota_violation import QuotaConstraint, QuotaViolation
from quillsync.domain.value_objects.sync_outcome import SkipReason, SyncState

__all__ = [
    "ContentFingerprint",
    "ContentMetrics",
    "LedgerAdjustment",
    "LedgerDelta",
    "QuotaConstraint",
    "QuotaViolation",
    "SkipReason",
    "SyncState",
]
