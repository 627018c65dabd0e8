"""
Prompt Composer - builds the system/user message pair for the agent

The action vocabulary section is generated from the schema enums so the
prompt and the validator always agree on field names and values.
"""
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from ticketdesk.models.schemas import (
    AgentMode,
    Priority,
    RetrievedDocument,
    Ticket,
    TicketMessage,
    TicketStatus,
)


class Prompt(BaseModel):
    """Composed prompt"""
    mode: AgentMode
    system: str
    user: str

    def to_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def _enum_values(enum_cls) -> str:
    return ", ".join(f'"{member.value}"' for member in enum_cls)


def action_vocabulary() -> str:
    """Closed list of permitted action shapes"""
    return "\n".join([
        f'- {{"type": "status", "value": <one of {_enum_values(TicketStatus)}>}}',
        f'- {{"type": "priority", "value": <one of {_enum_values(Priority)}>}}',
        '- {"type": "tags", "tags": [<existing tag name>, ...]}',
        '- {"type": "summary"}',
        '- {"type": "close"}',
        '- {"type": "post_note", "note": <non-empty internal note text>}',
    ])


OUTPUT_CONTRACT = """Respond with ONLY a JSON object, no prose before or after it, in exactly this shape:
{"actions": [<action>, ...], "message": "<short human-readable explanation for the support agent>"}

"message" is always required. Use an empty "actions" list when nothing should change."""


SCOPED_SYSTEM = """You are an AI assistant that manages a single customer support ticket.
Read the ticket, its conversation and the reference documents, then translate the support agent's instruction into actions.

Permitted actions (no other types or fields are accepted):
{vocabulary}

Rules:
- Only use the action types and values listed above.
- Tags must be names of existing tags; new tags are never created.
- "summary" generates a summary of the conversation; do not write it yourself.
- "close" closes the ticket.
- Internal notes are visible to support staff only.

{contract}"""


GENERAL_SYSTEM = """You are an AI assistant for a customer support team.
No ticket is selected, so you answer questions and give advice only; nothing will be changed.

For reference, when a ticket is selected the following actions exist:
{vocabulary}

In this mode "actions" must be an empty list.

{contract}"""


def _format_ticket(ticket: Ticket) -> str:
    tag_names = ", ".join(tag.name for tag in ticket.tags) or "none"
    return "\n".join([
        f"- ID: {ticket.id}",
        f"- Title: {ticket.title}",
        f"- Description: {ticket.description}",
        f"- Status: {ticket.status.value}",
        f"- Priority: {ticket.priority.value}",
        f"- Tags: {tag_names}",
        f"- Customer: {ticket.customer_id or 'unknown'}",
        f"- Assignee: {ticket.assigned_to or 'unassigned'}",
        f"- AI summary: {ticket.ai_summary or 'none'}",
    ])


def _message_label(message: TicketMessage) -> str:
    if message.is_system:
        return "System"
    if message.is_internal:
        return "Internal"
    return "Customer"


def _format_messages(messages: Sequence[TicketMessage]) -> str:
    if not messages:
        return "No messages yet."
    lines = []
    for message in messages:
        author = message.author_name or message.user_id or "unknown"
        lines.append(f"[{_message_label(message)}] {author}: {message.message}")
    return "\n".join(lines)


def format_context(context: Sequence[RetrievedDocument]) -> str:
    """Concatenate retrieved documents for the prompt"""
    if not context:
        return "No relevant documents found."
    return "\n\n".join(
        f"Document {i + 1}:\nFilename: {doc.filename}\nContent: \"{doc.content}\""
        for i, doc in enumerate(context)
    )


def compose(
    mode: AgentMode,
    instruction: str,
    ticket: Optional[Ticket] = None,
    messages: Optional[Sequence[TicketMessage]] = None,
    context: Sequence[RetrievedDocument] = ()
) -> Prompt:
    """
    Build the prompt for one request

    Args:
        mode: general or scoped
        instruction: Support agent's instruction
        ticket: Current ticket (scoped mode)
        messages: Ordered ticket conversation (scoped mode)
        context: Retrieved documents

    Returns:
        Prompt with system and user text
    """
    vocabulary = action_vocabulary()

    if mode == AgentMode.SCOPED:
        if ticket is None:
            raise ValueError("Scoped prompt requires a ticket")
        system = SCOPED_SYSTEM.format(vocabulary=vocabulary, contract=OUTPUT_CONTRACT)
        user = "\n\n".join([
            f"Ticket:\n{_format_ticket(ticket)}",
            f"Conversation:\n{_format_messages(messages or [])}",
            f"Reference documents:\n{format_context(context)}",
            f"Instruction: {instruction}",
        ])
    else:
        system = GENERAL_SYSTEM.format(vocabulary=vocabulary, contract=OUTPUT_CONTRACT)
        user = "\n\n".join([
            f"Reference documents:\n{format_context(context)}",
            f"Question: {instruction}",
        ])

    return Prompt(mode=mode, system=system, user=user)
