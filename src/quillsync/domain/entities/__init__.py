"""Domain entities."""

from quillsync.domain.entities.document import Document
from quillsync.domain.entities.document_version import DocumentVersion
from quillsync.domain.entities.quota_account import QuotaAccount, QuotaDefaults

__all__ = [
    "Document",
    "DocumentVersion",
    "QuotaAccount",
    "QuotaDefaults",
]
