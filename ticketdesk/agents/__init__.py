"""
LangGraph ticket agent

This module contains the pipeline stages and the agent that wires them.
"""

from ticketdesk.agents.errors import (
    AgentError,
    AuthorizationError,
    TicketNotFoundError,
    InterpreterError,
    ProtocolError,
    ExecutionError,
)
from ticketdesk.agents.orchestrator import TicketAgent

__all__ = [
    "AgentError",
    "AuthorizationError",
    "TicketNotFoundError",
    "InterpreterError",
    "ProtocolError",
    "ExecutionError",
    "TicketAgent",
]
