"""Usage DTOs."""

from dataclasses import dataclass

from quillsync.domain.entities import QuotaAccount


@dataclass
class UsageOutput:
    """Owner's ceilings and running totals."""

    max_documents: int
    max_document_size_bytes: int
    max_document_pages: int
    current_document_count: int
    total_storage_used_bytes: int
    document_limit_remaining: int

    @classmethod
    def from_account(cls, account: QuotaAccount) -> "UsageOutput":
        return cls(
            max_documents=account.max_documents,
            max_document_size_bytes=account.max_document_size_bytes,
            max_document_pages=account.max_document_pages,
            current_document_count=account.current_document_count,
            total_storage_used_bytes=account.total_storage_used_bytes,
            document_limit_remaining=account.document_limit_remaining,
        )
