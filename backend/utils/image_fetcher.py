# backend/utils/image_fetcher.py
import asyncio
import aiohttp
import logging
from typing import Optional

logger = logging.getLogger(__name__)


async def fetch_image(url: str) -> Optional[bytes]:
    """
    Downloads an image (remote document URL or public QR endpoint).

    Returns None on any failure; callers render a placeholder instead.
    No retries.
    """
    if not url:
        return None

    async with aiohttp.ClientSession() as session:
        try:
            async with session.get(url) as resp:
                if resp.status == 200:
                    data = await resp.read()
                    logger.info(f"Image fetched: {url} ({len(data)} bytes)")
                    return data
                logger.warning(f"Image fetch failed: {resp.status} - {url}")
                return None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Image fetch error for {url}: {e}")
            return None
