"""
LLM Service - Chat completion and embedding wrapper

Provides unified interface for:
- Chat completion (agent protocol calls and summaries)
- Embedding generation (retrieval queries)
"""
from typing import List, Dict, Optional, Any
from openai import AsyncOpenAI

from ticketdesk.config import Settings
from ticketdesk.utils.logger import get_logger

logger = get_logger(__name__)


class LLMService:
    """
    Thin async wrapper around the OpenAI client

    Errors from the SDK are logged and re-raised; callers decide how a
    failure is classified.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        """
        Initialize LLM service

        Args:
            settings: Application settings (API key, model names)
            client: Preconfigured AsyncOpenAI client (created if None)
        """
        self.settings = settings
        self.client = client or AsyncOpenAI(api_key=settings.openai_api_key)
        logger.info(f"LLMService initialized (chat={settings.chat_model}, embedding={settings.embedding_model})")

    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False
    ) -> str:
        """
        Run a chat completion

        Args:
            messages: Ordered chat messages ({"role", "content"})
            temperature: Sampling temperature
            model: Model name (default: settings.chat_model)
            max_tokens: Optional completion length bound
            json_mode: Ask the API for a JSON object response

        Returns:
            Completion text ("" if the model returned no content)
        """
        kwargs: Dict[str, Any] = {
            "model": model or self.settings.chat_model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except Exception as e:
            logger.error(f"Chat completion failed: {e}")
            raise

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def generate_embedding(self, text: str) -> List[float]:
        """
        Generate embedding for a single text

        Args:
            text: Input text

        Returns:
            Embedding vector as list of floats
        """
        try:
            response = await self.client.embeddings.create(
                model=self.settings.embedding_model,
                input=text
            )
            return list(response.data[0].embedding)
        except Exception as e:
            logger.error(f"Failed to generate embedding: {e}")
            raise
