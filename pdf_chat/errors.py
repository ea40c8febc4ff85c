"""Exceptions raised by the chat pipeline."""


class PdfChatError(Exception):
    """Base class for all pdf-chat errors."""


class ConfigError(PdfChatError):
    """Required configuration is missing or invalid."""


class EmbeddingError(PdfChatError):
    """The embedding provider could not embed the text."""


class SearchError(PdfChatError):
    """The vector index query failed."""


class CompletionError(PdfChatError):
    """The chat model call failed."""


class IngestionError(PdfChatError):
    """Loading, chunking or uploading the PDF failed."""
