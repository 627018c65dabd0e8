"""
Mode Router - per-request choice between general and scoped operation
"""
from typing import Literal, Optional

from langgraph.graph import END

from ticketdesk.models.graph_state import AgentState
from ticketdesk.models.schemas import AgentMode
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

GENERAL_TICKET_ID = "general"


def select_mode(ticket_id: Optional[str]) -> AgentMode:
    """
    Choose the agent mode from the request's ticket identifier

    Args:
        ticket_id: Ticket id, "general", or empty

    Returns:
        AgentMode.SCOPED for a concrete ticket id, AgentMode.GENERAL otherwise
    """
    if ticket_id is None:
        return AgentMode.GENERAL
    value = ticket_id.strip()
    if not value or value.lower() == GENERAL_TICKET_ID:
        return AgentMode.GENERAL
    return AgentMode.SCOPED


async def mode_router(state: AgentState) -> dict:
    """Graph node: record the mode for the request"""
    mode = select_mode(state.get("ticket_id"))
    logger.info(f"Routing decision: {mode.value}")
    return {"mode": mode}


def route_after_mode(state: AgentState) -> Literal["load_ticket", "retrieve_context"]:
    """General mode skips the ticket fetch"""
    if state.get("mode") == AgentMode.SCOPED:
        return "load_ticket"
    return "retrieve_context"


def route_after_validation(state: AgentState) -> str:
    """General mode never executes actions"""
    if state.get("mode") == AgentMode.SCOPED:
        return "execute_actions"
    return END
