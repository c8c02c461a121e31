from typing import Any, List, Optional


class RepositoryException(Exception):
    """Base exception for repository-related errors."""


class FaqNotFound(RepositoryException):
    """Exception raised when FAQ record data is not found."""


class ConfigurationError(Exception):
    """Exception raised when configuration is invalid."""


class OpenSearchException(Exception):
    """Base exception for OpenSearch-related errors."""

    def __init__(self, message: str, status_code: Any = None, info: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.info = info


class SchemaError(OpenSearchException):
    """Exception raised when index or mapping creation/retrieval fails."""


class DocumentNotFoundError(OpenSearchException):
    """Exception raised when updating or deleting a document key that does not exist."""


class TransportError(OpenSearchException):
    """Exception raised on network, timeout or authentication failures, or any
    other fault reported by the search service for a document operation."""


class PartialBatchFailure(OpenSearchException):
    """A bulk flush was only partially applied by the search service.

    Not raised by the bulk synchronizer; recorded on its result so callers can
    reconcile the failed keys.
    """

    def __init__(self, message: str, failed_keys: Optional[List[str]] = None, info: Any = None):
        super().__init__(message, info=info)
        self.failed_keys = failed_keys or []
