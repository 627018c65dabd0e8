"""
LangGraph State Schema for the ticket agent

State Flow:
    1. request fields: instruction, ticket_id, user_id
    2. mode: general | scoped (Mode Router)
    3. ticket / messages: loaded in scoped mode only
    4. context: retrieved documents
    5. prompt / raw_response: composer and interpreter outputs
    6. response: validated AgentResponse
    7. applied_actions: executor output
"""
from typing import TypedDict, Optional, List, Any
from typing_extensions import NotRequired

from ticketdesk.models.schemas import (
    AgentMode,
    AgentResponse,
    RetrievedDocument,
    Ticket,
    TicketMessage,
)


class AgentState(TypedDict):
    """
    LangGraph workflow state.

    Each node returns a partial update; LangGraph merges it into the state.
    """
    instruction: str
    ticket_id: Optional[str]
    user_id: str
    mode: NotRequired[AgentMode]
    ticket: NotRequired[Optional[Ticket]]
    messages: NotRequired[List[TicketMessage]]
    context: NotRequired[List[RetrievedDocument]]
    prompt: NotRequired[Any]
    raw_response: NotRequired[str]
    response: NotRequired[AgentResponse]
    applied_actions: NotRequired[List[str]]
