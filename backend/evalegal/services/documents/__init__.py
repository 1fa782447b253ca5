from .document_fetcher import DocumentFetcher, DocumentFetchError, DocumentTooLargeError

__all__ = [
    "DocumentFetcher",
    "DocumentFetchError",
    "DocumentTooLargeError",
]
