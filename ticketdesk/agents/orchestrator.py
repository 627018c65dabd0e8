"""
LangGraph orchestrator - assembles the ticket agent pipeline

Flow:
1. START → mode_router
2. mode_router → (load_ticket | retrieve_context)
3. load_ticket → retrieve_context → compose_prompt → interpret → validate
4. validate → (execute_actions | END)
5. execute_actions → END

Errors raised by a node abort the run and propagate to the caller.
"""
import asyncio
from typing import Optional

from langgraph.graph import StateGraph, END

from ticketdesk.agents.errors import AuthorizationError, TicketNotFoundError
from ticketdesk.agents.executor import ActionExecutor
from ticketdesk.agents.interpreter import InstructionInterpreter
from ticketdesk.agents.prompts import compose
from ticketdesk.agents.retriever import ContextRetriever
from ticketdesk.agents.router import mode_router, route_after_mode, route_after_validation
from ticketdesk.agents.validator import validate
from ticketdesk.config import Settings
from ticketdesk.models.graph_state import AgentState
from ticketdesk.models.schemas import AgentMode, AgentReply, AgentRequest, UserRole
from ticketdesk.repositories.ticket_repository import TicketRepository
from ticketdesk.services.document_search import DocumentSearchService
from ticketdesk.services.llm_service import LLMService
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)


def authorize(role: UserRole) -> None:
    """Only admin and support roles may use the agent"""
    if role == UserRole.CUSTOMER:
        raise AuthorizationError("Unauthorized: Only admin and support roles can use the AI agent")


class TicketAgent:
    """
    Ticket action agent

    Collaborators are built from the settings object unless injected.
    """

    def __init__(
        self,
        settings: Settings,
        repository: Optional[TicketRepository] = None,
        llm: Optional[LLMService] = None,
        search: Optional[DocumentSearchService] = None
    ):
        self.settings = settings
        self.repository = repository or TicketRepository(settings=settings)
        self.llm = llm or LLMService(settings)
        search = search or DocumentSearchService(settings=settings)

        self.retriever = ContextRetriever(settings, self.llm, search)
        self.interpreter = InstructionInterpreter(settings, self.llm)
        self.executor = ActionExecutor(settings, self.repository, self.llm)
        self.workflow = self.build_graph().compile()
        logger.info("TicketAgent workflow compiled")

    # ------------------------------------------------------------------
    # Graph nodes
    # ------------------------------------------------------------------

    async def load_ticket(self, state: AgentState) -> dict:
        ticket_id = state["ticket_id"]
        ticket = await asyncio.to_thread(self.repository.get_ticket, ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        messages = await asyncio.to_thread(self.repository.list_messages, ticket_id)
        logger.info(f"Loaded ticket {ticket_id} with {len(messages)} messages")
        return {"ticket": ticket, "messages": messages}

    async def retrieve_context(self, state: AgentState) -> dict:
        ticket_id = state["ticket_id"] if state.get("mode") == AgentMode.SCOPED else None
        context = await self.retriever.retrieve(state["instruction"], ticket_id)
        return {"context": context}

    async def compose_prompt(self, state: AgentState) -> dict:
        prompt = compose(
            state["mode"],
            state["instruction"],
            ticket=state.get("ticket"),
            messages=state.get("messages"),
            context=state.get("context", [])
        )
        return {"prompt": prompt}

    async def interpret(self, state: AgentState) -> dict:
        raw_response = await self.interpreter.interpret(state["prompt"])
        return {"raw_response": raw_response}

    async def validate_response(self, state: AgentState) -> dict:
        response = validate(state["raw_response"], state["mode"])
        return {"response": response}

    async def execute_actions(self, state: AgentState) -> dict:
        applied = await self.executor.execute(
            state["ticket_id"],
            state["response"].actions,
            state["user_id"]
        )
        return {"applied_actions": applied}

    # ------------------------------------------------------------------
    # Graph assembly
    # ------------------------------------------------------------------

    def build_graph(self) -> StateGraph:
        graph = StateGraph(AgentState)

        graph.add_node("mode_router", mode_router)
        graph.add_node("load_ticket", self.load_ticket)
        graph.add_node("retrieve_context", self.retrieve_context)
        graph.add_node("compose_prompt", self.compose_prompt)
        graph.add_node("interpret", self.interpret)
        graph.add_node("validate", self.validate_response)
        graph.add_node("execute_actions", self.execute_actions)

        graph.set_entry_point("mode_router")

        graph.add_conditional_edges(
            "mode_router",
            route_after_mode,
            {
                "load_ticket": "load_ticket",
                "retrieve_context": "retrieve_context"
            }
        )
        graph.add_edge("load_ticket", "retrieve_context")
        graph.add_edge("retrieve_context", "compose_prompt")
        graph.add_edge("compose_prompt", "interpret")
        graph.add_edge("interpret", "validate")

        graph.add_conditional_edges(
            "validate",
            route_after_validation,
            {
                "execute_actions": "execute_actions",
                END: END
            }
        )
        graph.add_edge("execute_actions", END)

        return graph

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, request: AgentRequest) -> AgentReply:
        """
        Handle one instruction

        Args:
            request: Inbound agent request

        Returns:
            AgentReply with the model's message and the applied action types

        Raises:
            AgentError: AuthorizationError, TicketNotFoundError, InterpreterError,
                ProtocolError or ExecutionError
        """
        authorize(request.user_role)

        initial: AgentState = {
            "instruction": request.instruction,
            "ticket_id": request.ticket_id,
            "user_id": request.user_id,
        }
        final = await self.workflow.ainvoke(initial)

        reply = AgentReply(
            message=final["response"].message,
            mode=final["mode"],
            actions=final.get("applied_actions", [])
        )
        logger.info(f"Agent run complete ({reply.mode.value}), applied: {[a.value for a in reply.actions]}")
        return reply
