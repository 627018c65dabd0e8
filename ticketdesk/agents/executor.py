"""
Action Executor - applies validated actions to the ticket store

Actions run sequentially in array order, one handler per action type. Each
handler is an independent store mutation. The first failure stops the batch
and raises ExecutionError; mutations applied before it stay committed.
Store calls run in worker threads so the Supabase client never blocks the
event loop.
"""
import asyncio
from typing import Awaitable, Callable, Dict, List, Sequence

from ticketdesk.agents.errors import ExecutionError
from ticketdesk.config import Settings
from ticketdesk.models.schemas import (
    Action,
    CloseAction,
    PostNoteAction,
    PriorityAction,
    StatusAction,
    SummaryAction,
    TagsAction,
    Ticket,
    TicketMessage,
    TicketStatus,
)
from ticketdesk.repositories.ticket_repository import TicketRepository
from ticketdesk.services.llm_service import LLMService
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that summarizes customer support conversations. "
    "Create a concise summary that captures the key points, any decisions made, "
    "and the current status. Focus on the most important details."
)


def _tag_key(name: str) -> str:
    return name.strip().lower()


def format_conversation(messages: Sequence[TicketMessage]) -> str:
    """Render the conversation for the summary prompt"""
    lines = []
    for message in messages:
        author = message.author_name or message.user_id or "Unknown"
        timestamp = message.created_at.strftime("%Y-%m-%d %H:%M") if message.created_at else "unknown time"
        note = " [Internal Note]" if message.is_internal else ""
        lines.append(f"{author} ({timestamp}): {message.message}{note}")
    return "\n\n".join(lines)


class ActionExecutor:
    """Small interpreter over the Action union"""

    def __init__(self, settings: Settings, repository: TicketRepository, llm: LLMService):
        self.settings = settings
        self.repository = repository
        self.llm = llm
        self._handlers: Dict[str, Callable[[str, Action, str], Awaitable[None]]] = {
            "status": self._apply_status,
            "priority": self._apply_priority,
            "tags": self._apply_tags,
            "summary": self._apply_summary,
            "close": self._apply_close,
            "post_note": self._apply_post_note,
        }

    async def execute(self, ticket_id: str, actions: Sequence[Action], acting_user_id: str) -> List[str]:
        """
        Apply actions to a ticket

        Args:
            ticket_id: Concrete ticket identifier
            actions: Validated actions, applied in order
            acting_user_id: User the internal messages are attributed to

        Returns:
            Applied action types, in order

        Raises:
            ExecutionError: First failing action; earlier actions remain applied
        """
        applied: List[str] = []

        for index, action in enumerate(actions):
            handler = self._handlers[action.type]
            try:
                await handler(ticket_id, action, acting_user_id)
            except Exception as e:
                logger.error(
                    f"Action #{index} ({action.type}) failed on ticket {ticket_id} "
                    f"after {len(applied)} applied: {e}"
                )
                raise ExecutionError(
                    f"Failed to apply '{action.type}' action: {e}",
                    action=action.type,
                    index=index,
                    applied=applied
                ) from e
            applied.append(action.type)
            logger.info(f"Applied action #{index} ({action.type}) to ticket {ticket_id}")

        return applied

    async def _apply_status(self, ticket_id: str, action: StatusAction, acting_user_id: str) -> None:
        await asyncio.to_thread(self.repository.update_ticket, ticket_id, {"status": action.value.value})

    async def _apply_priority(self, ticket_id: str, action: PriorityAction, acting_user_id: str) -> None:
        await asyncio.to_thread(self.repository.update_ticket, ticket_id, {"priority": action.value.value})

    async def _apply_tags(self, ticket_id: str, action: TagsAction, acting_user_id: str) -> None:
        tags = await asyncio.to_thread(self.repository.list_tags)
        catalog = {_tag_key(tag.name): tag for tag in tags}

        skipped = []
        attached = set()
        for name in action.tags:
            tag = catalog.get(_tag_key(name))
            if tag is None:
                skipped.append(name)
                continue
            if tag.id in attached:
                continue
            await asyncio.to_thread(self.repository.attach_tag, ticket_id, tag.id)
            attached.add(tag.id)

        if skipped:
            logger.info(f"Skipped unknown tags for ticket {ticket_id}: {skipped}")

    async def _apply_summary(self, ticket_id: str, action: SummaryAction, acting_user_id: str) -> None:
        ticket = await asyncio.to_thread(self.repository.get_ticket, ticket_id)
        if ticket is None:
            raise ValueError(f"Ticket {ticket_id} not found")
        messages = await asyncio.to_thread(self.repository.list_messages, ticket_id)

        summary = await self.llm.chat(
            self._summary_messages(ticket, messages),
            temperature=self.settings.summary_temperature,
            model=self.settings.summary_model,
            max_tokens=self.settings.summary_max_tokens
        )
        summary = (summary or "").strip()
        if not summary:
            raise ValueError("Summary generation returned no text")

        await asyncio.to_thread(
            self.repository.add_message, ticket_id, acting_user_id, summary, is_internal=True, is_system=True
        )
        await asyncio.to_thread(self.repository.update_ticket, ticket_id, {"ai_summary": summary})

    async def _apply_close(self, ticket_id: str, action: CloseAction, acting_user_id: str) -> None:
        await asyncio.to_thread(self.repository.update_ticket, ticket_id, {"status": TicketStatus.CLOSED.value})

    async def _apply_post_note(self, ticket_id: str, action: PostNoteAction, acting_user_id: str) -> None:
        await asyncio.to_thread(
            self.repository.add_message, ticket_id, acting_user_id, action.note, is_internal=True, is_system=True
        )

    @staticmethod
    def _summary_messages(ticket: Ticket, messages: Sequence[TicketMessage]) -> List[Dict[str, str]]:
        conversation = format_conversation(messages) or "No messages yet."
        state = (
            f"Title: {ticket.title}\n"
            f"Description: {ticket.description}\n"
            f"Status: {ticket.status.value}\n"
            f"Priority: {ticket.priority.value}"
        )
        return [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f"Please summarize this support ticket.\n\n{state}\n\nConversation:\n\n{conversation}"
            },
        ]
