"""
Bitrix24 chat delivery.

Posts messages to a chat dialog through the incoming-webhook REST method
``im.message.add``. Delivery is best effort: failures are logged and reported
as ``False``, never raised.
"""
import logging
from typing import Union

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

logger = logging.getLogger(__name__)

MESSAGE_ADD_METHOD = "im.message.add"
DEFAULT_TIMEOUT_SECONDS = 10.0
# One retry, and only when no HTTP response arrived at all
DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_RETRY_DELAY_SECONDS = 0.5


class BitrixClient:
    """Client for the Bitrix24 messaging REST API."""

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
    ):
        if not base_url:
            raise ValueError("Bitrix base URL is required")
        self.endpoint = f"{base_url.rstrip('/')}/{MESSAGE_ADD_METHOD}"
        self.http_client = http_client
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    async def _post(self, payload: dict) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.info(
                        f"Retrying Bitrix delivery (attempt {attempt.retry_state.attempt_number})"
                    )
                return await self.http_client.post(
                    self.endpoint, json=payload, timeout=self.timeout
                )

    async def send_message(self, chat_id: Union[str, int], message: str) -> bool:
        """
        Send a message into a Bitrix24 chat dialog.

        Args:
            chat_id: Bitrix dialog identifier
            message: Message text

        Returns:
            True if Bitrix accepted the message, False otherwise
        """
        if not chat_id:
            logger.warning("Skipping Bitrix delivery: chat id is empty")
            return False
        if not isinstance(message, str) or not message.strip():
            logger.warning(f"Skipping Bitrix delivery to chat {chat_id}: message is empty")
            return False

        payload = {"DIALOG_ID": str(chat_id), "MESSAGE": message}

        try:
            response = await self._post(payload)
        except httpx.TransportError as e:
            logger.error(
                f"Bitrix delivery to chat {chat_id} failed after {self.max_attempts} attempts: "
                f"{type(e).__name__} - {e}"
            )
            return False
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # Undecodable response body, malformed endpoint URL and the like
            logger.error(
                f"Bitrix delivery to chat {chat_id} failed: {type(e).__name__} - {e}"
            )
            return False

        if not response.is_success:
            logger.error(
                f"Bitrix delivery to chat {chat_id} rejected with HTTP {response.status_code}"
            )
            return False

        try:
            body = response.json()
        except ValueError:
            body = None

        # Bitrix reports REST errors as {"error": ..., "error_description": ...}
        if isinstance(body, dict) and body.get("error"):
            logger.error(
                f"Bitrix delivery to chat {chat_id} failed: "
                f"{body.get('error')} - {body.get('error_description', '')}"
            )
            return False

        logger.info(f"Delivered message to Bitrix chat {chat_id} ({len(message)} chars)")
        return True
