"""Application ports - interfaces for external adapters."""

from quillsync.application.ports.background_runner import BackgroundResult, BackgroundRunner
from quillsync.application.ports.semantic_index import IndexHit, SemanticIndex
from quillsync.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "BackgroundResult",
    "BackgroundRunner",
    "IndexHit",
    "SemanticIndex",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
