"""Repository ports."""

from quillsync.application.ports.repositories.document_repository import (
    DocumentRepository,
)
from quillsync.application.ports.repositories.document_version_repository import (
    DocumentVersionRepository,
)
from quillsync.application.ports.repositories.quota_account_repository import (
    QuotaAccountRepository,
)

__all__ = [
    "DocumentRepository",
    "DocumentVersionRepository",
    "QuotaAccountRepository",
]
