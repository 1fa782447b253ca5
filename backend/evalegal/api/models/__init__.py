from .error import ErrorResponse
from .legal import LegalRequest, LegalResponse, describe_validation_error, normalize_chat_id

__all__ = [
    "ErrorResponse",
    "LegalRequest",
    "LegalResponse",
    "describe_validation_error",
    "normalize_chat_id",
]
