"""
Document Search Service using Supabase pgvector

Features:
- Similarity search through the `match_documents` RPC
- Threshold and result-count bounds
- Optional ticket scope
- Lookup of documents attached directly to a ticket
"""
from typing import List, Dict, Any, Optional

from ticketdesk.config import Settings, get_settings
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentSearchService:
    """Service for semantic search over the `documents` table"""

    def __init__(self, supabase_client=None, settings: Optional[Settings] = None):
        """
        Initialize search service

        Args:
            supabase_client: Supabase client instance (created from settings if None)
            settings: Application settings (defaults to cached settings)
        """
        if supabase_client is None:
            from supabase import create_client
            settings = settings or get_settings()
            self.client = create_client(
                settings.supabase_url,
                settings.SUPABASE_KEY
            )
        else:
            self.client = supabase_client

        self.table_name = "documents"
        self.match_function = "match_documents"

    def search_similar(
        self,
        query_embedding: List[float],
        match_threshold: float,
        match_count: int,
        ticket_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Search for documents similar to the query embedding

        Args:
            query_embedding: Query vector
            match_threshold: Minimum similarity score (0.0 to 1.0)
            match_count: Maximum number of results
            ticket_id: Optional ticket scope

        Returns:
            Ranked rows with content, filename and similarity
        """
        params: Dict[str, Any] = {
            "query_embedding": query_embedding,
            "match_threshold": match_threshold,
            "match_count": match_count,
        }
        if ticket_id:
            params["ticket_id"] = ticket_id

        try:
            response = self.client.rpc(self.match_function, params).execute()
            results = response.data or []
            logger.info(f"Found {len(results)} documents above similarity {match_threshold}")
            return results

        except Exception as e:
            logger.error(f"Similarity search failed: {e}")
            raise

    def get_ticket_documents(self, ticket_id: str) -> List[Dict[str, Any]]:
        """
        Get documents attached to a ticket

        Args:
            ticket_id: Ticket identifier

        Returns:
            Document rows (id, filename, content)
        """
        try:
            response = self.client.table(self.table_name)\
                .select("id, filename, content")\
                .eq("ticket_id", ticket_id)\
                .execute()
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to get documents for ticket {ticket_id}: {e}")
            raise
