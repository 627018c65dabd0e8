"""
pytest configuration and shared fixtures for agent tests
"""
import json
from itertools import count
from typing import Any, Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from ticketdesk.config import Settings
from ticketdesk.models.schemas import Tag, Ticket, TicketMessage


class InMemoryTicketRepository:
    """
    In-memory stand-in for TicketRepository

    `fail_on` maps a method name to an exception raised on its next call.
    """

    def __init__(self):
        self.tickets: Dict[str, Dict[str, Any]] = {}
        self.messages: List[Dict[str, Any]] = []
        self.tags: List[Tag] = []
        self.ticket_tags: Set[Tuple[str, str]] = set()
        self.fail_on: Dict[str, Exception] = {}
        self.writes: List[Tuple[str, Any]] = []
        self._ids = count(1)

    def _maybe_fail(self, method: str) -> None:
        if method in self.fail_on:
            raise self.fail_on.pop(method)

    def add_ticket(self, ticket_id: str, **fields) -> None:
        row = {
            "id": ticket_id,
            "title": "Cannot login",
            "description": "Login fails after password reset",
            "status": "open",
            "priority": "medium",
            "customer_id": "cust-1",
        }
        row.update(fields)
        self.tickets[ticket_id] = row

    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        self._maybe_fail("get_ticket")
        row = self.tickets.get(ticket_id)
        if row is None:
            return None
        tags = [tag for tag in self.tags if (ticket_id, tag.id) in self.ticket_tags]
        return Ticket(**row, tags=tags)

    def list_messages(self, ticket_id: str) -> List[TicketMessage]:
        self._maybe_fail("list_messages")
        return [TicketMessage(**m) for m in self.messages if m["ticket_id"] == ticket_id]

    def update_ticket(self, ticket_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        self._maybe_fail("update_ticket")
        if ticket_id not in self.tickets:
            raise ValueError(f"Ticket {ticket_id} not found")
        self.tickets[ticket_id].update(updates)
        self.writes.append(("update_ticket", dict(updates)))
        return self.tickets[ticket_id]

    def add_message(self, ticket_id, user_id, message, is_internal=True, is_system=True) -> TicketMessage:
        self._maybe_fail("add_message")
        row = {
            "id": f"msg-{next(self._ids)}",
            "ticket_id": ticket_id,
            "user_id": user_id,
            "message": message,
            "is_internal": is_internal,
            "is_system": is_system,
        }
        self.messages.append(row)
        self.writes.append(("add_message", message))
        return TicketMessage(**row)

    def list_tags(self) -> List[Tag]:
        self._maybe_fail("list_tags")
        return list(self.tags)

    def attach_tag(self, ticket_id: str, tag_id: str) -> None:
        self._maybe_fail("attach_tag")
        self.ticket_tags.add((ticket_id, tag_id))
        self.writes.append(("attach_tag", tag_id))


@pytest.fixture
def settings() -> Settings:
    """Explicit settings for tests (no .env lookup)"""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        supabase_url="https://test.supabase.co",
        supabase_key="test-anon-key",
    )


@pytest.fixture
def repository() -> InMemoryTicketRepository:
    """Store with one open ticket, a short conversation and a tag catalog"""
    repo = InMemoryTicketRepository()
    repo.add_ticket("ticket-1")
    repo.messages = [
        {
            "id": "m1",
            "ticket_id": "ticket-1",
            "user_id": "cust-1",
            "author_name": "Jane Customer",
            "message": "I can't log in since resetting my password.",
            "is_internal": False,
            "is_system": False,
            "created_at": "2024-01-01T10:00:00Z",
        },
        {
            "id": "m2",
            "ticket_id": "ticket-1",
            "user_id": "agent-1",
            "author_name": "Sam Support",
            "message": "Asked engineering to check the auth logs.",
            "is_internal": True,
            "is_system": False,
            "created_at": "2024-01-01T11:00:00Z",
        },
    ]
    repo.tags = [
        Tag(id="tag-billing", name="Billing", color="green"),
        Tag(id="tag-login", name="Login", color="blue"),
    ]
    return repo


@pytest.fixture
def llm() -> MagicMock:
    """LLMService double; chat and embedding are AsyncMocks"""
    service = MagicMock()
    service.chat = AsyncMock(return_value=json.dumps({"actions": [], "message": "ok"}))
    service.generate_embedding = AsyncMock(return_value=[0.1, 0.2, 0.3])
    return service


@pytest.fixture
def search() -> MagicMock:
    """DocumentSearchService double with no results"""
    service = MagicMock()
    service.search_similar.return_value = []
    service.get_ticket_documents.return_value = []
    return service

