from .legal_prompts import (
    FILE_NOTICE_TEXT,
    LEGAL_SYSTEM_PROMPT,
    LEGAL_TASK_PROMPT_TEMPLATE,
    MISSING_VALUE_PLACEHOLDER,
)

__all__ = [
    "FILE_NOTICE_TEXT",
    "LEGAL_SYSTEM_PROMPT",
    "LEGAL_TASK_PROMPT_TEMPLATE",
    "MISSING_VALUE_PLACEHOLDER",
]
