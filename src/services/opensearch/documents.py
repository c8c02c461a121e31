import logging
from typing import Any, Optional

from src.schemas.faq import SyncResult

from .client import SearchServiceClient
from .projector import DocumentProjector, RecordLike

logger = logging.getLogger(__name__)


class DocumentSynchronizer:
    """
    Single-document index, update and delete keyed by solution id.

    The index is assumed to exist; schema is not re-checked per call.
    Remote faults propagate as raised by the client.
    """

    def __init__(
        self,
        client: SearchServiceClient,
        projector: DocumentProjector,
        index_name: str,
        refresh: Optional[str] = None,
    ):
        self.client = client
        self.projector = projector
        self.index_name = index_name
        self.refresh = refresh

    def index_one(self, record: RecordLike) -> SyncResult:
        """Create or fully replace the document for this record."""
        document = self.projector.project(record)
        response = self.client.index_document(
            self.index_name, document.key, document.to_body(), refresh=self.refresh
        )
        logger.debug(f"Indexed FAQ {document.key}: {response.get('result')}")
        return SyncResult(success=response.get("result") in ("created", "updated"), response=response)

    def update_one(self, record: RecordLike) -> SyncResult:
        """
        Merge the record into the existing document.

        Raises:
            DocumentNotFoundError: if no document is stored under the solution id
        """
        document = self.projector.project(record)
        response = self.client.update_document(
            self.index_name, document.key, {"doc": document.to_body()}, refresh=self.refresh
        )
        logger.debug(f"Updated FAQ {document.key}: {response.get('result')}")
        return SyncResult(success=response.get("result") in ("updated", "noop"), response=response)

    def delete_one(self, key: Any) -> SyncResult:
        """
        Raises:
            DocumentNotFoundError: if no document is stored under ``key``
        """
        response = self.client.delete_document(self.index_name, key, refresh=self.refresh)
        logger.debug(f"Deleted FAQ {key}")
        return SyncResult(success=response.get("result") == "deleted", response=response)
