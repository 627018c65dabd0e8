"""
Pytest configuration and fixtures
"""
import pytest
from typing import Any, Dict, List


@pytest.fixture
def sample_ticket_row() -> Dict[str, Any]:
    """Ticket row as returned by the store, tags already flattened"""
    return {
        "id": "ticket-1",
        "title": "Cannot login",
        "description": "User unable to login after password reset",
        "status": "open",
        "priority": "medium",
        "customer_id": "cust-1",
        "tags": [{"id": "tag-login", "name": "Login", "color": "blue"}],
    }


@pytest.fixture
def sample_actions() -> List[Dict[str, Any]]:
    """One action of every type"""
    return [
        {"type": "status", "value": "in_progress"},
        {"type": "priority", "value": "urgent"},
        {"type": "tags", "tags": ["Login", "Billing"]},
        {"type": "summary"},
        {"type": "close"},
        {"type": "post_note", "note": "Escalated to engineering"},
    ]
