"""Domain exceptions."""

from quillsync.domain.value_objects.quota_violation import QuotaViolation


class QuillSyncError(Exception):
    """Base exception for Quillsync."""

    pass


class ValidationError(QuillSyncError):
    """Validation failed for input data."""

    pass


class NotFound(QuillSyncError):
    """Requested resource was not found (or is not owned by the caller)."""

    pass


class QuotaExceeded(QuillSyncError):
    """Admission check failed; carries every violated constraint."""

    def __init__(self, violations: list[QuotaViolation]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.errors) or "Quota exceeded")

    @property
    def errors(self) -> list[str]:
        return [v.message for v in self.violations]


class SemanticIndexError(QuillSyncError):
    """Remote semantic index call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
