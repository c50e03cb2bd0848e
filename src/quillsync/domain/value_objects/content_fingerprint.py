"""Fingerprint of synced text for change detection."""

import hashlib
import re
from dataclasses import dataclass

_MD5_HEX = re.compile(r"^[0-9a-f]{32}$")


@dataclass(frozen=True)
class ContentFingerprint:
    """MD5 hex digest of a document's derived text."""

    value: str

    def __post_init__(self) -> None:
        if not _MD5_HEX.match(self.value):
            raise ValueError("Fingerprint must be 32 lowercase hex characters")

    @classmethod
    def of(cls, text: str) -> "ContentFingerprint":
        return cls(hashlib.md5(text.encode("utf-8")).hexdigest())

    def matches(self, stored: str | None) -> bool:
        return stored is not None and stored == self.value
