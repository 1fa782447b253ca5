"""
Tests for the OpenAI legal analysis client.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from evalegal.services.llm import (
    EMPTY_AI_RESPONSE_FALLBACK,
    AICompletionError,
    LegalAnalysisAIClient,
    build_legal_analysis_messages,
)
from evalegal.services.prompts import FILE_NOTICE_TEXT, LEGAL_SYSTEM_PROMPT


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _openai_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def test_messages_have_expected_shape():
    messages = build_legal_analysis_messages("Проверить договор", "D-100", "c2FtcGxl")

    assert len(messages) == 4
    assert messages[0] == {"role": "system", "content": LEGAL_SYSTEM_PROMPT}
    assert "Задача: Проверить договор" in messages[1]["content"]
    assert "Сделка: D-100" in messages[1]["content"]
    assert messages[2]["content"][0]["text"] == FILE_NOTICE_TEXT
    file_part = messages[3]["content"][0]
    assert file_part["type"] == "file"
    assert file_part["file"]["file_data"] == "data:application/pdf;base64,c2FtcGxl"


def test_missing_task_and_deal_use_placeholder():
    messages = build_legal_analysis_messages(None, None, "")

    assert messages[1]["content"].startswith("Задача: не указана. Сделка: не указана.")


def test_generate_returns_trimmed_answer():
    create = AsyncMock(return_value=_completion("  Готовый отчёт \n"))
    client = LegalAnalysisAIClient(_openai_client(create), model="gpt-4o", timeout=30)

    answer = asyncio.run(client.generate("Анализ условий", "DL-77", "YmluYXJ5"))

    assert answer == "Готовый отчёт"
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["timeout"] == 30
    assert len(kwargs["messages"]) == 4


@pytest.mark.parametrize("content", ["", "   \n\t", None])
def test_generate_falls_back_on_empty_content(content):
    client = LegalAnalysisAIClient(_openai_client(AsyncMock(return_value=_completion(content))))

    assert asyncio.run(client.generate("task", "deal", "")) == EMPTY_AI_RESPONSE_FALLBACK


def test_generate_falls_back_without_choices():
    create = AsyncMock(return_value=SimpleNamespace(choices=[]))
    client = LegalAnalysisAIClient(_openai_client(create))

    assert asyncio.run(client.generate("task", "deal", "")) == EMPTY_AI_RESPONSE_FALLBACK


def test_upstream_failure_raises_completion_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    create = AsyncMock(side_effect=openai.APIConnectionError(request=request))
    client = LegalAnalysisAIClient(_openai_client(create))

    with pytest.raises(AICompletionError, match="AI request failed"):
        asyncio.run(client.generate("task", "deal", ""))


def test_upstream_timeout_raises_completion_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    create = AsyncMock(side_effect=openai.APITimeoutError(request=request))
    client = LegalAnalysisAIClient(_openai_client(create))

    with pytest.raises(AICompletionError, match="timed out"):
        asyncio.run(client.generate("task", "deal", ""))
