"""Get document use case."""

from uuid import UUID

from quillsync.application.dto.document_dto import DocumentOutput
from quillsync.domain.exceptions import NotFound


class GetDocumentUseCase:
    """Get an owned, non-archived document by id."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, owner_id: str, document_id: UUID) -> DocumentOutput:
        async with self._uow_factory() as uow:
            document = await uow.documents.get_for_owner(document_id, owner_id)
        if document is None:
            raise NotFound("Document", str(document_id))
        return DocumentOutput.from_entity(document)
