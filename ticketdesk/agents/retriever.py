"""
Context Retriever
Retrieves knowledge passages relevant to an instruction

Combines:
- Similarity search over embedded documents (threshold + top-k bound)
- Documents attached directly to the current ticket

Retrieval never fails the request: each backend error is logged and the
agent continues with whatever the other call returned.
"""

import asyncio
from typing import Any, Dict, List, Optional

from ticketdesk.config import Settings
from ticketdesk.models.schemas import RetrievedDocument
from ticketdesk.services.document_search import DocumentSearchService
from ticketdesk.services.llm_service import LLMService
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)


def _to_document(row: Dict[str, Any]) -> RetrievedDocument:
    return RetrievedDocument(
        id=str(row["id"]) if row.get("id") is not None else None,
        content=row.get("content") or "",
        filename=row.get("filename") or "",
        similarity=row.get("similarity"),
    )


def _document_key(document: RetrievedDocument) -> str:
    return document.id or document.filename


class ContextRetriever:
    """Semantic retrieval plus ticket attachments"""

    def __init__(self, settings: Settings, llm: LLMService, search: DocumentSearchService):
        self.llm = llm
        self.search = search
        self.match_threshold = settings.match_threshold
        self.match_count = settings.match_count

    async def retrieve(self, query_text: str, ticket_id: Optional[str] = None) -> List[RetrievedDocument]:
        """
        Retrieve documents relevant to the query text

        Args:
            query_text: Free-text instruction
            ticket_id: Optional ticket whose attachments are added

        Returns:
            Documents, similarity hits first, deduplicated. A failing backend
            call contributes nothing; the other call's results are kept
        """
        if not (query_text or "").strip() and not ticket_id:
            logger.debug("Empty query and no ticket, skipping retrieval")
            return []

        documents: List[RetrievedDocument] = []

        if (query_text or "").strip():
            try:
                embedding = await self.llm.generate_embedding(query_text)
                rows = await asyncio.to_thread(
                    self.search.search_similar,
                    query_embedding=embedding,
                    match_threshold=self.match_threshold,
                    match_count=self.match_count,
                    ticket_id=ticket_id
                )
                documents.extend(_to_document(row) for row in rows[:self.match_count])
            except Exception as e:
                logger.warning(f"Similarity search failed, continuing without it: {e}")

        if ticket_id:
            try:
                attached = await asyncio.to_thread(self.search.get_ticket_documents, ticket_id)
                documents.extend(_to_document(row) for row in attached)
            except Exception as e:
                logger.warning(f"Attachment lookup failed for ticket {ticket_id}, continuing without it: {e}")

        seen = set()
        unique: List[RetrievedDocument] = []
        for document in documents:
            key = _document_key(document)
            if key and key in seen:
                continue
            seen.add(key)
            unique.append(document)

        logger.info(f"Retrieved {len(unique)} context documents")
        return unique
