"""
Pydantic models for the Ticketdesk agent

This module contains the records read from the Supabase ticket store, the
closed action vocabulary the language model may emit, and the request /
response models of the agent endpoint.

The Action union is the wire contract between the model and the executor:
every variant is keyed by its ``type`` literal and rejects unknown fields.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List, Literal, Union

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing_extensions import Annotated


# ============================================================================
# Enums
# ============================================================================

class TicketStatus(str, Enum):
    """Valid ticket statuses"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, Enum):
    """Valid ticket priorities"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class UserRole(str, Enum):
    """Roles of the user issuing an instruction"""
    ADMIN = "admin"
    SUPPORT = "support"
    CUSTOMER = "customer"


class AgentMode(str, Enum):
    """Agent operating mode, chosen per request"""
    GENERAL = "general"
    SCOPED = "scoped"


class ActionType(str, Enum):
    """Action vocabulary accepted from the language model"""
    STATUS = "status"
    PRIORITY = "priority"
    TAGS = "tags"
    SUMMARY = "summary"
    CLOSE = "close"
    POST_NOTE = "post_note"


# ============================================================================
# Store records (matching Supabase tables)
# ============================================================================

class Tag(BaseModel):
    """Global tag from the `tags` catalog"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: Optional[str] = None


class Ticket(BaseModel):
    """
    Ticket record from the `tickets` table.

    Attributes:
        id: Ticket identifier
        title: Short title
        description: Customer's description of the issue
        status: Current status
        priority: Current priority
        customer_id: Profile id of the customer
        assigned_to: Profile id of the assignee (optional)
        tags: Tags attached through `ticket_tags`
        ai_summary: Last generated summary (optional)
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str = ""
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    priority: Priority = Priority.MEDIUM
    customer_id: Optional[str] = None
    assigned_to: Optional[str] = None
    tags: List[Tag] = Field(default_factory=list)
    ai_summary: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TicketMessage(BaseModel):
    """Message from the `ticket_messages` table"""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    ticket_id: str
    user_id: Optional[str] = None
    author_name: Optional[str] = None
    message: str
    is_internal: bool = False
    is_system: bool = False
    created_at: Optional[datetime] = None


class RetrievedDocument(BaseModel):
    """Knowledge passage returned by retrieval; never persisted"""
    id: Optional[str] = None
    content: str = ""
    filename: str = ""
    similarity: Optional[float] = None


# ============================================================================
# Action vocabulary
# ============================================================================

class _ActionBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


class StatusAction(_ActionBase):
    """Set the ticket status"""
    type: Literal["status"]
    value: TicketStatus


class PriorityAction(_ActionBase):
    """Set the ticket priority"""
    type: Literal["priority"]
    value: Priority


class TagsAction(_ActionBase):
    """Attach existing catalog tags by name"""
    type: Literal["tags"]
    tags: List[str]


class SummaryAction(_ActionBase):
    """Generate and store an AI summary"""
    type: Literal["summary"]


class CloseAction(_ActionBase):
    """Close the ticket"""
    type: Literal["close"]


class PostNoteAction(_ActionBase):
    """Append an internal note"""
    type: Literal["post_note"]
    note: str

    @field_validator("note")
    @classmethod
    def validate_note(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("note must be a non-empty string")
        return v


Action = Annotated[
    Union[
        StatusAction,
        PriorityAction,
        TagsAction,
        SummaryAction,
        CloseAction,
        PostNoteAction,
    ],
    Field(discriminator="type"),
]


class AgentResponse(BaseModel):
    """Validated model output: actions to execute plus a human-readable message"""
    actions: List[Action] = Field(default_factory=list)
    message: str


# ============================================================================
# API Models
# ============================================================================

class AgentRequest(BaseModel):
    """Inbound agent instruction"""
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: Optional[str] = Field(None, alias="ticketId", description="Ticket id or 'general'")
    instruction: str = Field(..., min_length=1, description="Free-text instruction")
    user_role: UserRole = Field(..., alias="userRole")
    user_id: str = Field(..., min_length=1, alias="userId")


class AgentReply(BaseModel):
    """Successful agent response"""
    message: str
    mode: AgentMode
    actions: List[ActionType] = Field(default_factory=list, description="Applied action types, in order")


class ErrorResponse(BaseModel):
    """Structured failure returned to the caller"""
    error: str
    kind: str
    details: Optional[str] = None
