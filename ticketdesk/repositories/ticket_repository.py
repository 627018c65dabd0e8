"""
Ticket Repository for the agent's reads and writes on the ticket store

Features:
- Ticket lookup with attached tags
- Ordered conversation history with author names
- Single-row ticket updates (status, priority, ai_summary)
- Internal / system message inserts
- Tag catalog lookup and idempotent tag attachment

Each call is one Supabase request; there are no cross-row transactions.
"""
from typing import List, Optional, Dict, Any

from ticketdesk.config import Settings, get_settings
from ticketdesk.models.schemas import Ticket, TicketMessage, Tag
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

TICKET_SELECT = "*, tags:ticket_tags(tag:tags(id, name, color))"
MESSAGE_SELECT = "*, profiles(full_name)"


class TicketRepository:
    """Repository for tickets, ticket_messages, tags and ticket_tags"""

    def __init__(self, supabase_client=None, settings: Optional[Settings] = None):
        """
        Initialize repository with Supabase client

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

        self.tickets_table = "tickets"
        self.messages_table = "ticket_messages"
        self.tags_table = "tags"
        self.ticket_tags_table = "ticket_tags"
        logger.info("TicketRepository initialized")

    @staticmethod
    def _to_ticket(row: Dict[str, Any]) -> Ticket:
        data = dict(row)
        tags = []
        for link in data.pop("tags", None) or []:
            tag = link.get("tag") if isinstance(link, dict) and "tag" in link else link
            if tag:
                tags.append(Tag(**tag))
        return Ticket(**data, tags=tags)

    @staticmethod
    def _to_message(row: Dict[str, Any]) -> TicketMessage:
        data = dict(row)
        profile = data.pop("profiles", None) or {}
        if profile.get("full_name"):
            data["author_name"] = profile["full_name"]
        return TicketMessage(**data)

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        """
        Get ticket by ID, including attached tags

        Args:
            ticket_id: Ticket identifier

        Returns:
            Ticket if found, None otherwise
        """
        try:
            response = self.client.table(self.tickets_table)\
                .select(TICKET_SELECT)\
                .eq("id", ticket_id)\
                .execute()

            if not response.data:
                return None

            return self._to_ticket(response.data[0])

        except Exception as e:
            logger.error(f"Failed to get ticket {ticket_id}: {e}")
            raise

    def list_messages(self, ticket_id: str) -> List[TicketMessage]:
        """
        Get the ticket conversation ordered by creation time

        Args:
            ticket_id: Ticket identifier

        Returns:
            List of TicketMessages, oldest first
        """
        try:
            response = self.client.table(self.messages_table)\
                .select(MESSAGE_SELECT)\
                .eq("ticket_id", ticket_id)\
                .order("created_at", desc=False)\
                .execute()

            return [self._to_message(row) for row in response.data]

        except Exception as e:
            logger.error(f"Failed to list messages for ticket {ticket_id}: {e}")
            raise

    def update_ticket(self, ticket_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update fields of a single ticket row

        Args:
            ticket_id: Ticket identifier
            updates: Column values to set

        Returns:
            Updated row

        Raises:
            ValueError: If the ticket does not exist
        """
        try:
            response = self.client.table(self.tickets_table)\
                .update(updates)\
                .eq("id", ticket_id)\
                .execute()

            if not response.data:
                raise ValueError(f"Ticket {ticket_id} not found")

            logger.info(f"Updated ticket {ticket_id}: {sorted(updates)}")
            return response.data[0]

        except Exception as e:
            logger.error(f"Failed to update ticket {ticket_id}: {e}")
            raise

    def add_message(
        self,
        ticket_id: str,
        user_id: str,
        message: str,
        is_internal: bool = True,
        is_system: bool = True
    ) -> TicketMessage:
        """
        Append a message to the ticket conversation

        Args:
            ticket_id: Ticket identifier
            user_id: Author profile id
            message: Message body
            is_internal: Hidden from the customer
            is_system: Machine-authored

        Returns:
            Created TicketMessage
        """
        try:
            data = {
                "ticket_id": ticket_id,
                "user_id": user_id,
                "message": message,
                "is_internal": is_internal,
                "is_system": is_system,
            }
            response = self.client.table(self.messages_table).insert(data).execute()

            if not response.data:
                raise ValueError(f"Failed to add message to ticket {ticket_id}")

            result = self._to_message(response.data[0])
            logger.info(f"Added {'internal' if is_internal else 'public'} message to ticket {ticket_id}")
            return result

        except Exception as e:
            logger.error(f"Failed to add message to ticket {ticket_id}: {e}")
            raise

    def list_tags(self) -> List[Tag]:
        """
        Get the global tag catalog

        Returns:
            List of Tags
        """
        try:
            response = self.client.table(self.tags_table).select("*").execute()
            return [Tag(**row) for row in response.data]

        except Exception as e:
            logger.error(f"Failed to list tags: {e}")
            raise

    def attach_tag(self, ticket_id: str, tag_id: str) -> None:
        """
        Attach a tag to a ticket; attaching twice leaves one association

        Args:
            ticket_id: Ticket identifier
            tag_id: Tag identifier
        """
        try:
            self.client.table(self.ticket_tags_table)\
                .upsert(
                    {"ticket_id": ticket_id, "tag_id": tag_id},
                    on_conflict="ticket_id,tag_id"
                )\
                .execute()

            logger.debug(f"Attached tag {tag_id} to ticket {ticket_id}")

        except Exception as e:
            logger.error(f"Failed to attach tag {tag_id} to ticket {ticket_id}: {e}")
            raise
