"""Search API resource."""

import falcon.asgi

from quillsync.application.dto.search_dto import SearchInput
from quillsync.application.use_cases.search.search_documents import SearchDocumentsUseCase
from quillsync.domain.exceptions import ValidationError


class SearchResource:
    """GET /v1/search?q=&limit= - search the caller's documents."""

    def __init__(self, search_documents: SearchDocumentsUseCase) -> None:
        self._search_documents = search_documents

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            limit = int(req.get_param("limit") or 10)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "limit must be an integer"}
            return

        try:
            results = await self._search_documents.execute(
                user.user_id, SearchInput(query=req.get_param("q") or "", limit=limit)
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = {
            "results": [
                {
                    "document_id": str(r.document_id),
                    "title": r.title,
                    "score": round(r.score, 6),
                    "word_count": r.word_count,
                    "updated_at": r.updated_at.isoformat(),
                    "matched_chunks": r.matched_chunks,
                }
                for r in results
            ],
        }
        resp.status = falcon.HTTP_200
