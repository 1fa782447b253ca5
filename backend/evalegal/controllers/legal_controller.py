"""
Controller for legal analysis operations.

Handles the business logic of a legal analysis request: allowlist check,
document download and the AI completion. Delivery of the answer is left to
the endpoint.
"""
import base64
import logging
from typing import Iterable, Optional, Union

from fastapi import HTTPException, status

from evalegal.services.documents import DocumentFetcher, DocumentFetchError
from evalegal.services.llm import AICompletionError, LegalAnalysisAIClient

logger = logging.getLogger(__name__)


class LegalAnalysisController:
    """Controller for legal analysis operations."""

    def __init__(
        self,
        ai_client: LegalAnalysisAIClient,
        document_fetcher: DocumentFetcher,
        chat_allowlist: Iterable[str] = (),
    ):
        if ai_client is None:
            raise ValueError("ai_client is required")
        if document_fetcher is None:
            raise ValueError("document_fetcher is required")
        self.ai_client = ai_client
        self.document_fetcher = document_fetcher
        self.chat_allowlist = frozenset(str(chat_id) for chat_id in chat_allowlist)

    def is_chat_allowed(self, chat_id: Union[str, int, None]) -> bool:
        """An empty allowlist admits every chat."""
        if not self.chat_allowlist:
            return True
        return str(chat_id) in self.chat_allowlist

    async def process_legal_request(
        self,
        chat_id: Union[str, int, None],
        deal_id: Optional[Union[str, int, float]],
        file_url: Optional[str],
        task: Optional[str],
    ) -> str:
        """
        Run the legal analysis workflow and return the AI answer.

        Args:
            chat_id: Bitrix chat that asked for the analysis
            deal_id: CRM deal the document belongs to
            file_url: Where to download the contract from
            task: What the analyst should do with it

        Returns:
            The answer text to deliver to the chat

        Raises:
            HTTPException 400: Missing chat id or file URL, or the download failed
            HTTPException 403: The chat is not on the allowlist
            HTTPException 500: The AI request failed
        """
        if not chat_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="chatId required")
        if not file_url:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="fileUrl required")
        if not self.is_chat_allowed(chat_id):
            logger.warning(f"Rejected request from chat {chat_id}: not in allowlist")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="chat not allowed")

        logger.info(f"Processing legal request: chat={chat_id} deal={deal_id}")

        try:
            document = await self.document_fetcher.fetch(file_url)
        except DocumentFetchError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

        document_base64 = base64.b64encode(document).decode("ascii")

        try:
            answer = await self.ai_client.generate(task, deal_id, document_base64)
        except AICompletionError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
            ) from e

        logger.info(f"Legal analysis complete for chat {chat_id}: {len(answer)} chars")
        return answer
