"""
Speech synthesis client.
"""

import asyncio
from pathlib import Path
from typing import Optional

import openai
from openai import AsyncOpenAI

from doorknob.config.settings import BotConfig
from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import UpstreamAPIError

logger = get_logger(__name__)


class SpeechClient:
    """
    Turns text into an MP3 file at the configured speech path.

    Every call overwrites the same file; callers that read it back must not
    let two syntheses interleave.
    """

    def __init__(self, config: BotConfig, client: Optional[AsyncOpenAI] = None):
        self.config = config
        self.client = client or AsyncOpenAI(api_key=config.openai_api_key)

    async def synthesize(self, text: str) -> Path:
        """
        Synthesize ``text`` and return the path of the written file.

        Raises:
            UpstreamAPIError: If the API call fails
        """
        path = self.config.speech_path
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)

        try:
            async with self.client.audio.speech.with_streaming_response.create(
                model=self.config.speech_model,
                voice=self.config.speech_voice,
                input=text,
            ) as response:
                await response.stream_to_file(path)
        except openai.OpenAIError as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise UpstreamAPIError(f"Speech synthesis failed: {e}") from e

        logger.debug(f"Synthesized {len(text)} characters to {path}")
        return path
