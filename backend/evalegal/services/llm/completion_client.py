"""
LLM client for contract analysis.

Wraps the OpenAI Chat Completions API: builds the legal analysis prompt around
an attached PDF and returns the generated report text.
"""
import logging
from typing import Any, Dict, List, Optional, Union

import openai
from openai import AsyncOpenAI

from evalegal.services.prompts import (
    FILE_NOTICE_TEXT,
    LEGAL_SYSTEM_PROMPT,
    LEGAL_TASK_PROMPT_TEMPLATE,
    MISSING_VALUE_PLACEHOLDER,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TIMEOUT_SECONDS = 120.0
DOCUMENT_MIME_TYPE = "application/pdf"
DOCUMENT_FILENAME = "contract.pdf"
EMPTY_AI_RESPONSE_FALLBACK = "Пустой ответ от AI."


class AICompletionError(Exception):
    """Raised when the completion endpoint could not produce an answer."""


def _render(value: Optional[Union[str, int, float]]) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return MISSING_VALUE_PLACEHOLDER
    return str(value)


def build_legal_analysis_messages(
    task: Optional[str],
    deal_id: Optional[Union[str, int, float]],
    document_base64: str,
) -> List[Dict[str, Any]]:
    """
    Construct the chat messages for a legal analysis request.

    The conversation is always four messages long: the analyst persona, the
    task summary, a short notice about the attachment and the attachment itself.
    """
    return [
        {"role": "system", "content": LEGAL_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": LEGAL_TASK_PROMPT_TEMPLATE.format(
                task=_render(task), deal_id=_render(deal_id)
            ),
        },
        {
            "role": "user",
            "content": [{"type": "text", "text": FILE_NOTICE_TEXT}],
        },
        {
            "role": "user",
            "content": [
                {
                    "type": "file",
                    "file": {
                        "filename": DOCUMENT_FILENAME,
                        "file_data": f"data:{DOCUMENT_MIME_TYPE};base64,{document_base64}",
                    },
                }
            ],
        },
    ]


class LegalAnalysisAIClient:
    """Client for legal analysis completions."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        if client is None:
            raise ValueError("OpenAI client is required")
        self.client = client
        self.model = model
        self.timeout = timeout

    async def generate(
        self,
        task: Optional[str],
        deal_id: Optional[Union[str, int, float]],
        document_base64: str,
    ) -> str:
        """
        Generate the analysis report for an encoded document.

        Args:
            task: Free-form task description from the caller
            deal_id: CRM deal identifier, rendered into the prompt as-is
            document_base64: The contract PDF, base64 encoded

        Returns:
            The trimmed answer, or EMPTY_AI_RESPONSE_FALLBACK if the model
            returned no content

        Raises:
            AICompletionError: If the completion request fails
        """
        messages = build_legal_analysis_messages(task, deal_id, document_base64)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                timeout=self.timeout,
            )
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI request timed out after {self.timeout}s: {e}")
            raise AICompletionError("AI request timed out") from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI request failed: {type(e).__name__} - {e}")
            raise AICompletionError("AI request failed") from e

        content = None
        if response is not None and response.choices:
            content = response.choices[0].message.content

        answer = (content or "").strip()
        if not answer:
            logger.warning(f"Empty completion from model {self.model}, using fallback text")
            return EMPTY_AI_RESPONSE_FALLBACK
        return answer
