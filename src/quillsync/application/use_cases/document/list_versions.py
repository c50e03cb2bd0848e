"""List document versions use case."""

from uuid import UUID

from quillsync.application.dto.document_dto import DocumentVersionOutput
from quillsync.domain.exceptions import NotFound


class ListDocumentVersionsUseCase:
    """Snapshots of an owned document, newest first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, owner_id: str, document_id: UUID, limit: int = 20
    ) -> list[DocumentVersionOutput]:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_for_owner(document_id, owner_id)
            if document is None:
                raise NotFound("Document", str(document_id))
            versions = await uow.versions.list_for_document(document_id, limit=min(max(limit, 1), 100))
        return [DocumentVersionOutput.from_entity(v) for v in versions]
