"""
Ticket Agent API Routes

Single operation: accept an instruction for a ticket (or "general"), run the
agent, and return its message. Agent failures are returned as structured
errors with a human-readable message.
"""

from functools import lru_cache
from typing import Dict, Type

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ticketdesk.agents.errors import (
    AgentError,
    AuthorizationError,
    ExecutionError,
    InterpreterError,
    ProtocolError,
    TicketNotFoundError,
)
from ticketdesk.agents.orchestrator import TicketAgent
from ticketdesk.config import get_settings
from ticketdesk.models.schemas import AgentReply, AgentRequest, ErrorResponse
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/agent", tags=["agent"])

ERROR_STATUS: Dict[Type[AgentError], int] = {
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    TicketNotFoundError: status.HTTP_404_NOT_FOUND,
    ProtocolError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InterpreterError: status.HTTP_502_BAD_GATEWAY,
    ExecutionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@lru_cache()
def get_agent() -> TicketAgent:
    """Get the shared agent instance built from application settings"""
    return TicketAgent(get_settings())


def error_status(error: AgentError) -> int:
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@router.post(
    "/ticket-agent",
    response_model=AgentReply,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    }
)
async def run_ticket_agent(
    request: AgentRequest,
    agent: TicketAgent = Depends(get_agent)
):
    """
    Run the ticket agent on one instruction.

    Args:
        request: ticketId ("general" for no ticket), instruction, userRole, userId

    Returns:
        AgentReply on success, ErrorResponse otherwise
    """
    try:
        return await agent.run(request)

    except AgentError as e:
        code = error_status(e)
        logger.error(f"Ticket agent failed ({e.kind}, {code}): {e.message}")
        return JSONResponse(status_code=code, content=e.to_dict())

    except Exception as e:
        logger.error(f"Unexpected ticket agent error: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(e), kind="internal_error").model_dump()
        )
