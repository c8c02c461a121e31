import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type

from opensearchpy import OpenSearch
from opensearchpy import exceptions as os_exceptions
from src.exceptions import DocumentNotFoundError, OpenSearchException, SchemaError, TransportError

logger = logging.getLogger(__name__)

# Faults that say nothing about the request itself: network, timeouts, credentials
_TRANSPORT_FAULTS = (
    os_exceptions.ConnectionError,
    os_exceptions.AuthenticationException,
    os_exceptions.AuthorizationException,
)


@contextmanager
def _translate_faults(
    operation: str,
    target: str,
    not_found: Type[OpenSearchException],
    other: Type[OpenSearchException],
) -> Iterator[None]:
    """Re-raise opensearch-py faults as domain exceptions carrying status and remote info."""
    try:
        yield
    except _TRANSPORT_FAULTS as e:
        logger.error(f"Transport failure during {operation} on {target}: {e}")
        raise TransportError(f"{operation} on {target} failed: {e}", status_code=e.status_code, info=e.info) from e
    except os_exceptions.NotFoundError as e:
        logger.warning(f"{operation} on {target}: not found")
        raise not_found(f"{operation} on {target} failed: {e.error}", status_code=e.status_code, info=e.info) from e
    except os_exceptions.TransportError as e:
        logger.error(f"{operation} on {target} rejected: {e}")
        raise other(f"{operation} on {target} failed: {e.error}", status_code=e.status_code, info=e.info) from e


class SearchServiceClient:
    """
    Thin adapter over the OpenSearch client.

    Every call is a single blocking round-trip bounded by the client's request
    timeout. Responses are returned as received; faults are translated into
    SchemaError, DocumentNotFoundError or TransportError. Nothing is retried.
    """

    def __init__(self, client: OpenSearch, host: str = ""):
        self.client = client
        self.host = host

    # ============================================================
    # INDEX MANAGEMENT
    # ============================================================

    def index_exists(self, index: str) -> bool:
        with _translate_faults("index exists check", index, SchemaError, SchemaError):
            return bool(self.client.indices.exists(index=index))

    def create_index(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        with _translate_faults("index creation", index, SchemaError, SchemaError):
            return self.client.indices.create(index=index, body=body)

    def get_mapping(self, index: str) -> Dict[str, Any]:
        with _translate_faults("mapping retrieval", index, SchemaError, SchemaError):
            return self.client.indices.get_mapping(index=index)

    def put_mapping(self, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
        with _translate_faults("mapping update", index, SchemaError, SchemaError):
            return self.client.indices.put_mapping(index=index, body=body)

    def delete_index(self, index: str) -> Dict[str, Any]:
        with _translate_faults("index deletion", index, SchemaError, SchemaError):
            return self.client.indices.delete(index=index)

    # ============================================================
    # DOCUMENTS
    # ============================================================

    def index_document(
        self,
        index: str,
        doc_id: Any,
        body: Dict[str, Any],
        refresh: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or fully replace the document stored under ``doc_id``."""
        kwargs: Dict[str, Any] = {"index": index, "id": doc_id, "body": body}
        if refresh is not None:
            kwargs["refresh"] = refresh
        with _translate_faults("document index", f"{index}/{doc_id}", DocumentNotFoundError, TransportError):
            return self.client.index(**kwargs)

    def update_document(
        self,
        index: str,
        doc_id: Any,
        body: Dict[str, Any],
        refresh: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Partially update an existing document; ``body`` is the full update request."""
        kwargs: Dict[str, Any] = {"index": index, "id": doc_id, "body": body}
        if refresh is not None:
            kwargs["refresh"] = refresh
        with _translate_faults("document update", f"{index}/{doc_id}", DocumentNotFoundError, TransportError):
            return self.client.update(**kwargs)

    def delete_document(self, index: str, doc_id: Any, refresh: Optional[str] = None) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"index": index, "id": doc_id}
        if refresh is not None:
            kwargs["refresh"] = refresh
        with _translate_faults("document delete", f"{index}/{doc_id}", DocumentNotFoundError, TransportError):
            return self.client.delete(**kwargs)

    def bulk(self, body: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Send alternating action/source lines as one bulk request."""
        with _translate_faults("bulk request", f"{len(body) // 2} actions", TransportError, TransportError):
            return self.client.bulk(body=body)

    # ============================================================
    # HEALTH
    # ============================================================

    def health_check(self) -> bool:
        """Check if OpenSearch is healthy and accessible."""
        try:
            health = self.client.cluster.health()
            return health["status"] in ["green", "yellow"]
        except os_exceptions.OpenSearchException as e:
            logger.error(f"Health check failed: {e}")
            return False
