"""
OpenAI completion client for legal analysis.
"""
from .completion_client import (
    EMPTY_AI_RESPONSE_FALLBACK,
    AICompletionError,
    LegalAnalysisAIClient,
    build_legal_analysis_messages,
)

__all__ = [
    "EMPTY_AI_RESPONSE_FALLBACK",
    "AICompletionError",
    "LegalAnalysisAIClient",
    "build_legal_analysis_messages",
]
