"""
Action Validator - parses and type-checks model output

The model's output is untrusted input. A response is accepted only if it is
a bare JSON object with `actions` and `message` and, in scoped mode, every
action matches the closed vocabulary. Any failure rejects the whole response
so no part of a malformed batch is ever executed.
"""
import json
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from ticketdesk.agents.errors import ProtocolError
from ticketdesk.models.schemas import Action, AgentMode, AgentResponse
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)

_action_adapter: TypeAdapter = TypeAdapter(Action)


def _summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "action"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


def parse_action(item: Any, index: int, raw_text: str):
    """Validate a single action element"""
    if not isinstance(item, dict):
        raise ProtocolError(f"Action #{index} must be an object", raw_text)
    if "type" not in item:
        raise ProtocolError(f"Action #{index} is missing 'type'", raw_text)

    try:
        return _action_adapter.validate_python(item)
    except ValidationError as e:
        raise ProtocolError(
            f"Action #{index} ({item.get('type')!r}) is invalid: {_summarize_validation_error(e)}",
            raw_text
        ) from e


def validate(raw_text: str, mode: AgentMode = AgentMode.SCOPED) -> AgentResponse:
    """
    Parse and validate a raw model response

    Args:
        raw_text: Completion text from the interpreter
        mode: Request mode; actions are only checked in scoped mode

    Returns:
        AgentResponse (actions always empty in general mode)

    Raises:
        ProtocolError: Parse failure, missing fields, or any invalid action
    """
    try:
        payload = json.loads(raw_text)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning(f"Model response is not valid JSON: {e}")
        raise ProtocolError(f"Model response is not valid JSON: {e}", raw_text) from e

    if not isinstance(payload, dict):
        raise ProtocolError("Model response must be a JSON object", raw_text)

    if "actions" not in payload:
        raise ProtocolError("Model response is missing 'actions'", raw_text)
    if not isinstance(payload["actions"], list):
        raise ProtocolError("'actions' must be a list", raw_text)
    if "message" not in payload:
        raise ProtocolError("Model response is missing 'message'", raw_text)
    if not isinstance(payload["message"], str):
        raise ProtocolError("'message' must be a string", raw_text)

    if mode != AgentMode.SCOPED:
        return AgentResponse(actions=[], message=payload["message"])

    actions: List[Any] = [
        parse_action(item, index, raw_text)
        for index, item in enumerate(payload["actions"])
    ]

    logger.info(f"Validated {len(actions)} actions: {[a.type for a in actions]}")
    return AgentResponse(actions=actions, message=payload["message"])
