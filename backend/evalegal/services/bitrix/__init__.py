from .bitrix_client import BitrixClient

__all__ = ["BitrixClient"]
