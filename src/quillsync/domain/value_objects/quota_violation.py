"""Quota constraint violations reported by admission checks."""

from dataclasses import dataclass
from enum import StrEnum


class QuotaConstraint(StrEnum):
    """Per-owner ceilings enforced on document mutations."""

    DOCUMENT_COUNT = "document_count"
    DOCUMENT_SIZE = "document_size"
    PAGE_COUNT = "page_count"


@dataclass(frozen=True)
class QuotaViolation:
    """One violated ceiling with a human readable message."""

    constraint: QuotaConstraint
    message: str
