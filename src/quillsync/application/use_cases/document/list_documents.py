"""List documents use case."""

from quillsync.application.dto.document_dto import DocumentOutput, DocumentPage

MAX_PAGE_SIZE = 100


class ListDocumentsUseCase:
    """Owner's non-archived documents, most recently updated first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, owner_id: str, page: int = 1, limit: int = 10) -> DocumentPage:
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)
        async with self._uow_factory() as uow:
            documents, total = await uow.documents.list_for_owner(
                owner_id, limit=limit, offset=(page - 1) * limit
            )
        return DocumentPage(
            items=[DocumentOutput.from_entity(d) for d in documents],
            page=page,
            limit=limit,
            total=total,
        )
