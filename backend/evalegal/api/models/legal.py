"""
Request and response models for the legal analysis webhook.
"""
from typing import Any, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


def normalize_chat_id(value: Any) -> Optional[str]:
    """
    Normalize a chat id to its string form.

    Numbers and non-empty strings are accepted. Anything else (including
    booleans and blank strings) yields None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _is_absolute_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        # e.g. an unterminated IPv6 host
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class LegalRequest(BaseModel):
    """Payload posted by the CRM webhook.

    - chatId: Bitrix chat to answer in (number or string)
    - dealId: CRM deal identifier, optional
    - fileUrl: Absolute URL of the contract to analyze
    - task: What to do with the contract
    """
    model_config = ConfigDict(populate_by_name=True)

    chat_id: str = Field(..., alias="chatId")
    deal_id: Optional[Union[int, float, str]] = Field(default=None, alias="dealId")
    file_url: str = Field(..., alias="fileUrl")
    task: str

    @field_validator("chat_id", mode="before")
    @classmethod
    def _validate_chat_id(cls, value: Any) -> str:
        chat_id = normalize_chat_id(value)
        if chat_id is None:
            raise ValueError("chatId required")
        return chat_id

    @field_validator("file_url", mode="before")
    @classmethod
    def _validate_file_url(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("fileUrl required")
        value = value.strip()
        if not _is_absolute_url(value):
            raise ValueError("fileUrl must be a valid URL")
        return value

    @field_validator("task", mode="before")
    @classmethod
    def _validate_task(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("task required")
        return value.strip()


class LegalResponse(BaseModel):
    """Acknowledgement returned once the answer has been produced."""

    ok: bool = True


def describe_validation_error(error: ValidationError) -> str:
    """Turn the first pydantic error into a short public message."""
    first = error.errors()[0]
    field = first["loc"][0] if first.get("loc") else "body"
    if first["type"] == "missing":
        return f"{field} required"
    if first["type"] == "value_error" and "error" in first.get("ctx", {}):
        return str(first["ctx"]["error"])
    return f"{field}: {first['msg']}"
