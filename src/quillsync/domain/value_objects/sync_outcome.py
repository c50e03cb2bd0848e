"""Semantic index synchronization states and skip reasons."""

from enum import StrEnum


class SyncState(StrEnum):
    """Observable sync state of a document, derived from its external index id."""

    UNSYNCED = "unsynced"
    SYNCED = "synced"


class SkipReason(StrEnum):
    """Why a reconciliation made no remote call."""

    FEATURE_DISABLED = "feature-disabled"
    DOCUMENT_ARCHIVED = "document-archived"
    BELOW_MINIMUM_WORD_COUNT = "below-minimum-word-count"
    EMPTY_CONTENT = "empty-content"
    UNCHANGED = "unchanged"
    NOT_SYNCED = "not-synced"
