"""Download bulk operation result files to local temp storage."""
import asyncio
import logging
import tempfile
import uuid
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os
import aiohttp

from .exceptions import ShopifyBulkApiError


class BulkResultDownloader:
    """Streams a result URL into a uniquely named JSONL file."""

    FILE_CHUNK_SIZE_BYTES = 64 * 1024

    def __init__(
        self,
        session: aiohttp.ClientSession,
        chunk_size: int = FILE_CHUNK_SIZE_BYTES,
        read_timeout: Optional[float] = 60.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.session = session
        self.chunk_size = chunk_size
        self.read_timeout = read_timeout
        self.logger = logger or logging.getLogger(__name__)

    async def download(
        self,
        url: str,
        directory: Optional[Union[str, Path]] = None,
    ) -> Path:
        """Fetch ``url`` into a temp file and return its path.

        Raises:
            ShopifyBulkApiError: On non-2xx status or network failure
        """
        target_dir = Path(directory) if directory else Path(tempfile.gettempdir())
        path = target_dir / f"shopify_bulk_{uuid.uuid4().hex}.jsonl"

        # Per-read deadline only; total transfer time is unbounded.
        timeout = aiohttp.ClientTimeout(total=None, sock_read=self.read_timeout)

        written = 0
        try:
            async with self.session.get(url, timeout=timeout) as resp:
                if not 200 <= resp.status < 300:
                    body = await resp.text()
                    raise ShopifyBulkApiError(
                        f"Result download failed: HTTP {resp.status}, body={body[:200]}",
                        status=resp.status,
                        body=body,
                    )

                async with aiofiles.open(path, mode="wb") as f:
                    async for chunk in resp.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        written += len(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            await self.remove(path)
            raise ShopifyBulkApiError(f"Network error downloading result: {e}") from e
        except Exception:
            await self.remove(path)
            raise

        self.logger.info("Downloaded bulk result: path=%s, bytes=%s", path, written)
        return path

    async def remove(self, path: Union[str, Path]) -> None:
        """Remove a downloaded file with error suppression."""
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            self.logger.error(f"Failed to remove bulk result file: {exc}")
