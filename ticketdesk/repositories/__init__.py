"""
Repositories package for database operations

Provides repository classes for the ticket store:
- tickets, ticket_messages, tags, ticket_tags tables (TicketRepository)
"""
from ticketdesk.repositories.ticket_repository import TicketRepository

__all__ = [
    "TicketRepository",
]
