"""
Agent error taxonomy

Every failure surfaced to the caller is an AgentError subclass. `kind` is the
stable identifier used in error responses.
"""
from typing import Any, Dict, List, Optional


class AgentError(Exception):
    """Base class for agent failures"""

    kind = "agent_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "kind": self.kind,
            "details": self.details,
        }


class AuthorizationError(AgentError):
    """Caller's role may not use the agent"""

    kind = "authorization_error"


class TicketNotFoundError(AgentError):
    """Scoped request names a ticket that does not exist"""

    kind = "ticket_not_found"


class InterpreterError(AgentError):
    """Language model or network failure"""

    kind = "interpreter_error"


class ProtocolError(AgentError):
    """Model output is not a valid AgentResponse"""

    kind = "protocol_error"

    def __init__(self, message: str, raw_text: str):
        super().__init__(message, details=raw_text)
        self.raw_text = raw_text


class ExecutionError(AgentError):
    """
    A store mutation failed mid-batch.

    Actions listed in `applied` were committed before the failure and are not
    rolled back.
    """

    kind = "execution_error"

    def __init__(self, message: str, action: str, index: int, applied: List[str]):
        applied_text = ", ".join(applied) if applied else "none"
        super().__init__(message, details=f"failed action #{index} ({action}); applied before failure: {applied_text}")
        self.action = action
        self.index = index
        self.applied = list(applied)
