"""
Pydantic models for the Ticketdesk agent
"""

from ticketdesk.models.schemas import (
    # Enums
    TicketStatus,
    Priority,
    UserRole,
    AgentMode,
    ActionType,

    # Store records
    Tag,
    Ticket,
    TicketMessage,
    RetrievedDocument,

    # Actions
    Action,
    StatusAction,
    PriorityAction,
    TagsAction,
    SummaryAction,
    CloseAction,
    PostNoteAction,
    AgentResponse,

    # API Models
    AgentRequest,
    AgentReply,
    ErrorResponse,
)

__all__ = [
    # Enums
    "TicketStatus",
    "Priority",
    "UserRole",
    "AgentMode",
    "ActionType",

    # Store records
    "Tag",
    "Ticket",
    "TicketMessage",
    "RetrievedDocument",

    # Actions
    "Action",
    "StatusAction",
    "PriorityAction",
    "TagsAction",
    "SummaryAction",
    "CloseAction",
    "PostNoteAction",
    "AgentResponse",

    # API Models
    "AgentRequest",
    "AgentReply",
    "ErrorResponse",
]
