"""
Image generation client.

Images are requested as URLs and downloaded into the data directory, so the
command layer can attach them as files.
"""

import asyncio
import uuid
from pathlib import Path
from typing import List, Optional

import aiohttp
import openai
from openai import AsyncOpenAI

from doorknob.config.settings import BotConfig
from doorknob.infrastructure import get_logger
from doorknob.infrastructure.exceptions import UpstreamAPIError

logger = get_logger(__name__)

DOWNLOAD_TIMEOUT = aiohttp.ClientTimeout(total=60)


class ImageClient:
    """Generates images for a prompt and stores them as local files."""

    def __init__(self, config: BotConfig, client: Optional[AsyncOpenAI] = None):
        self.config = config
        self.client = client or AsyncOpenAI(api_key=config.openai_api_key)

    async def generate(self, query: str) -> List[Path]:
        """
        Generate one image for ``query``.

        Returns:
            Paths of the downloaded images, in the order the API returned them

        Raises:
            UpstreamAPIError: If generation or the download fails
        """
        try:
            response = await self.client.images.generate(
                model=self.config.image_model,
                prompt=query,
                n=1,
                size=self.config.image_size,
                response_format="url",
            )
        except openai.OpenAIError as e:
            logger.error(f"Image generation failed: {e}")
            raise UpstreamAPIError(f"Image generation failed: {e}") from e

        urls = [image.url for image in response.data if image.url]
        if not urls:
            raise UpstreamAPIError("Image generation returned no images")

        await asyncio.to_thread(self.config.data_dir.mkdir, parents=True, exist_ok=True)

        paths = []
        try:
            async with aiohttp.ClientSession(timeout=DOWNLOAD_TIMEOUT) as session:
                for url in urls:
                    paths.append(await self._download(session, url))
        except aiohttp.ClientError as e:
            logger.error(f"Image download failed: {e}")
            raise UpstreamAPIError(f"Image download failed: {e}") from e

        logger.info(f"Generated {len(paths)} image(s)")
        return paths

    async def _download(self, session: aiohttp.ClientSession, url: str) -> Path:
        async with session.get(url) as response:
            response.raise_for_status()
            content = await response.read()

        path = self.config.data_dir / f"{uuid.uuid4().hex}.png"
        await asyncio.to_thread(path.write_bytes, content)
        return path
