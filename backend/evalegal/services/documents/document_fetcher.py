"""
Document download for legal analysis.

Streams the contract referenced by the webhook and enforces the size cap while
reading, so an oversized file is dropped before it is held in memory.
"""
import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_MAX_BYTES = 20 * 1024 * 1024
ACCEPT_HEADER = "application/pdf, application/octet-stream;q=0.9, */*;q=0.8"


class DocumentFetchError(Exception):
    """Raised when the document could not be downloaded."""


class DocumentTooLargeError(DocumentFetchError):
    """Raised when the document exceeds the configured size cap."""


class DocumentFetcher:
    """Downloads documents over HTTP with time and size limits."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self.http_client = http_client
        self.timeout = timeout
        self.max_bytes = max_bytes

    def _too_large(self) -> DocumentTooLargeError:
        limit_mb = self.max_bytes / (1024 * 1024)
        return DocumentTooLargeError(f"document exceeds the {limit_mb:g} MB limit")

    async def _download(self, url: str) -> bytes:
        async with self.http_client.stream(
            "GET",
            url,
            headers={"Accept": ACCEPT_HEADER},
            timeout=self.timeout,
            follow_redirects=True,
        ) as response:
            if not response.is_success:
                logger.warning(
                    f"Document download returned HTTP {response.status_code} for {url}"
                )
                raise DocumentFetchError(
                    f"document download failed with HTTP {response.status_code}"
                )

            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > self.max_bytes:
                logger.warning(
                    f"Document declares {declared} bytes, cap is {self.max_bytes}: {url}"
                )
                raise self._too_large()

            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > self.max_bytes:
                    logger.warning(f"Document stream passed {self.max_bytes} bytes: {url}")
                    raise self._too_large()

        return bytes(buffer)

    async def fetch(self, url: str) -> bytes:
        """
        Download the document at ``url``.

        ``timeout`` bounds the whole download, not just each network operation,
        so a server trickling bytes cannot hold the request open.

        Raises:
            DocumentTooLargeError: If the declared or streamed size is over the cap
            DocumentFetchError: On timeout, transport failure or a non-2xx status
        """
        try:
            document = await asyncio.wait_for(self._download(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Document download timed out after {self.timeout}s: {url}")
            raise DocumentFetchError("document download timed out") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Document download failed: {type(e).__name__} - {e}")
            raise DocumentFetchError("document download failed") from e

        logger.info(f"Downloaded document: {len(document)} bytes")
        return document
