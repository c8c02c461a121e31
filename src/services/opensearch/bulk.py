import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Union

from src.exceptions import TransportError
from src.schemas.faq import BatchFailure, BulkSyncResult, NormalizedDocument, SyncResult

from .client import SearchServiceClient
from .projector import DocumentProjector, RecordLike, is_active

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


class BulkBatch:
    """Ordered index actions waiting to be flushed, never more than ``max_size``."""

    def __init__(self, max_size: int = DEFAULT_BATCH_SIZE):
        if max_size < 1:
            raise ValueError("Batch size must be at least 1")
        self.max_size = max_size
        self.documents: List[NormalizedDocument] = []

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def is_full(self) -> bool:
        return len(self.documents) >= self.max_size

    @property
    def keys(self) -> List[str]:
        return [str(document.key) for document in self.documents]

    def append(self, document: NormalizedDocument) -> None:
        if self.is_full:
            raise OverflowError(f"Batch already holds {self.max_size} documents")
        self.documents.append(document)

    def to_body(self, index_name: str) -> List[Dict[str, Any]]:
        body: List[Dict[str, Any]] = []
        for document in self.documents:
            body.append({"index": {"_index": index_name, "_id": document.key}})
            body.append(document.to_body())
        return body


def failed_item_keys(response: Dict[str, Any]) -> List[str]:
    """Ids of the items a bulk response reports as failed."""
    keys = []
    for item in response.get("items", []):
        for outcome in item.values():
            if outcome.get("error"):
                keys.append(str(outcome.get("_id")))
    return keys


class BulkSynchronizer:
    """
    Batched indexing of many FAQ records.

    Inactive records are skipped before projection. Batches are flushed
    sequentially in input order. A failed flush is recorded and the next
    batch is still attempted; nothing is retried or rolled back. Re-running
    over the same records is a safe upsert and converges the index.
    """

    def __init__(
        self,
        client: SearchServiceClient,
        projector: DocumentProjector,
        index_name: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        legacy_result: bool = False,
    ):
        self.client = client
        self.projector = projector
        self.index_name = index_name
        self.batch_size = batch_size
        self.legacy_result = legacy_result

    def bulk_index(
        self,
        records: Iterable[RecordLike],
        batch_size: Optional[int] = None,
        legacy_result: Optional[bool] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Union[BulkSyncResult, SyncResult]:
        """
        Index every active record through bulk requests.

        Args:
            records: FAQ records in the order they should be applied
            batch_size: Documents per bulk request (defaults to the configured size)
            legacy_result: Return only the last flush's outcome as a SyncResult
            cancel_event: Once set, no further flush is started

        Returns:
            BulkSyncResult aggregated over all flushes, or SyncResult in legacy mode
        """
        if batch_size is None:
            batch_size = self.batch_size
        legacy_result = self.legacy_result if legacy_result is None else legacy_result

        result = BulkSyncResult()
        batch = BulkBatch(batch_size)
        last_response: Optional[Dict[str, Any]] = None
        last_error: Optional[str] = None

        for record in records:
            if not is_active(record):
                result.skipped += 1
                continue

            batch.append(self.projector.project(record))
            if batch.is_full:
                if self._cancelled(cancel_event, result):
                    break
                last_response, last_error = self._flush(batch, result)
                batch = BulkBatch(batch_size)

        if len(batch) and not result.cancelled and not self._cancelled(cancel_event, result):
            last_response, last_error = self._flush(batch, result)

        result.last_response = last_response
        logger.info(
            f"Bulk indexing into {self.index_name}: {result.indexed} indexed, {result.skipped} inactive skipped, "
            f"{result.succeeded_batches}/{result.total_batches} batches succeeded"
        )

        if legacy_result:
            return self._legacy(result, last_response, last_error)
        return result

    def _cancelled(self, cancel_event: Optional[threading.Event], result: BulkSyncResult) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            logger.warning(f"Bulk indexing cancelled after {result.total_batches} batches")
            result.cancelled = True
            return True
        return False

    def _flush(self, batch: BulkBatch, result: BulkSyncResult):
        result.total_batches += 1
        number = result.total_batches
        logger.debug(f"Flushing batch {number} with {len(batch)} documents")

        try:
            response = self.client.bulk(batch.to_body(self.index_name))
        except TransportError as e:
            self._record_failure(result, BatchFailure(
                batch_number=number,
                size=len(batch),
                error_detail=e.message,
                failed_keys=batch.keys,
            ))
            return None, e.message

        if response.get("errors"):
            failed_keys = failed_item_keys(response)
            result.indexed += len(batch) - len(failed_keys)
            detail = f"{len(failed_keys)} of {len(batch)} items rejected"
            self._record_failure(result, BatchFailure(
                batch_number=number,
                size=len(batch),
                error_detail=detail,
                failed_keys=failed_keys,
            ))
            return response, detail

        result.indexed += len(batch)
        result.succeeded_batches += 1
        return response, None

    def _record_failure(self, result: BulkSyncResult, failure: BatchFailure) -> None:
        logger.error(f"Bulk batch {failure.batch_number} failed: {failure.error_detail}")
        if result.first_failure is None:
            result.first_failure = failure

    def _legacy(
        self,
        result: BulkSyncResult,
        last_response: Optional[Dict[str, Any]],
        last_error: Optional[str],
    ) -> SyncResult:
        if result.total_batches == 0:
            return SyncResult(success=False, error_detail="No active records to index")
        return SyncResult(success=last_error is None, response=last_response, error_detail=last_error)
