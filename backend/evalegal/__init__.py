"""
EvaLegalAI Core: contract analysis relay between Bitrix24 and OpenAI.
"""

__version__ = "1.0.0"
