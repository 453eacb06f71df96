"""
Chat completion client.
"""

from typing import Optional

import openai
from openai import AsyncOpenAI

from doorknob.config.settings import BotConfig
from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import UpstreamAPIError

logger = get_logger(__name__)


class ChatClient:
    """Answers a single user query with the configured chat model."""

    def __init__(self, config: BotConfig, client: Optional[AsyncOpenAI] = None):
        """
        Initialize the chat client.

        Args:
            config: Bot configuration (model, token limit, system prompt)
            client: Shared OpenAI client; one is created from the config if omitted
        """
        self.config = config
        self.client = client or AsyncOpenAI(api_key=config.openai_api_key)

    async def complete(self, query: str) -> str:
        """
        Get the model's reply to ``query``.

        No conversation history is kept; every call sends the system prompt
        and one user message.

        Raises:
            UpstreamAPIError: If the API call fails or returns no text
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.config.chat_model,
                messages=[
                    {"role": "system", "content": self.config.system_prompt},
                    {"role": "user", "content": query},
                ],
                max_tokens=self.config.chat_max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error(f"Chat completion failed: {e}")
            raise UpstreamAPIError(f"Chat completion failed: {e}") from e

        if not response.choices or not response.choices[0].message.content:
            raise UpstreamAPIError("Chat completion returned no text")

        text = response.choices[0].message.content
        logger.debug(f"Chat completion returned {len(text)} characters")
        return text
