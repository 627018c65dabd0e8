"""
Instruction Interpreter - runs the composed prompt through the chat model
"""
from ticketdesk.agents.errors import InterpreterError
from ticketdesk.agents.prompts import Prompt
from ticketdesk.config import Settings
from ticketdesk.services.llm_service import LLMService
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)


class InstructionInterpreter:
    """Invokes the model at a fixed low temperature in JSON mode"""

    def __init__(self, settings: Settings, llm: LLMService):
        self.llm = llm
        self.model = settings.chat_model
        self.temperature = settings.agent_temperature

    async def interpret(self, prompt: Prompt) -> str:
        """
        Get the raw model response for a prompt

        Args:
            prompt: Composed prompt

        Returns:
            Raw completion text (unvalidated)

        Raises:
            InterpreterError: On any model or network failure, or empty output
        """
        logger.info(f"Interpreting instruction ({prompt.mode.value} mode, model={self.model})")

        try:
            raw_text = await self.llm.chat(
                prompt.to_messages(),
                temperature=self.temperature,
                model=self.model,
                json_mode=True
            )
        except Exception as e:
            raise InterpreterError(f"Language model call failed: {e}") from e

        if not raw_text or not raw_text.strip():
            raise InterpreterError("Language model returned an empty response")

        logger.debug(f"Raw model response: {raw_text[:500]}")
        return raw_text
