import logging
import threading
from typing import Any, Dict, Iterable, Optional, Union

from src.exceptions import SchemaError
from src.schemas.faq import BulkSyncResult, MappingStatus, SyncResult

from .bulk import BulkSynchronizer
from .documents import DocumentSynchronizer
from .projector import RecordLike
from .schema import IndexSchemaManager

logger = logging.getLogger(__name__)


class FaqSearchIndex:
    """
    Keeps the FAQ search index in step with the FAQ records.

    A failed schema setup blocks every later synchronization call on this
    instance until a setup call succeeds.
    """

    def __init__(
        self,
        schema: IndexSchemaManager,
        documents: DocumentSynchronizer,
        bulk: BulkSynchronizer,
    ):
        self.schema = schema
        self.documents = documents
        self.bulk = bulk
        self._schema_failed = False

    @property
    def index_name(self) -> str:
        return self.schema.index_name

    # ============================================================
    # SCHEMA
    # ============================================================

    def create_index(self) -> bool:
        created = self._track_schema(self.schema.create_index)
        self._schema_failed = not created
        return created

    def put_mapping(self) -> MappingStatus:
        status = self._track_schema(self.schema.ensure_mapping)
        self._schema_failed = status is MappingStatus.FAILED
        return status

    def ensure_index(self) -> MappingStatus:
        status = self._track_schema(self.schema.ensure_index)
        self._schema_failed = status is MappingStatus.FAILED
        return status

    def get_mapping(self) -> Dict[str, Any]:
        return self.schema.get_mapping()

    def drop_index(self) -> Dict[str, Any]:
        return self.schema.drop_index()

    def _track_schema(self, setup):
        try:
            return setup()
        except SchemaError:
            self._schema_failed = True
            raise

    def _require_schema(self) -> None:
        if self._schema_failed:
            raise SchemaError(f"Schema setup for {self.index_name} failed; synchronization is disabled")

    # ============================================================
    # DOCUMENTS
    # ============================================================

    def index_one(self, record: RecordLike) -> SyncResult:
        self._require_schema()
        return self.documents.index_one(record)

    def update_one(self, record: RecordLike) -> SyncResult:
        self._require_schema()
        return self.documents.update_one(record)

    def delete_one(self, key: Any) -> SyncResult:
        self._require_schema()
        return self.documents.delete_one(key)

    def bulk_index(
        self,
        records: Iterable[RecordLike],
        batch_size: Optional[int] = None,
        legacy_result: Optional[bool] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Union[BulkSyncResult, SyncResult]:
        self._require_schema()
        return self.bulk.bulk_index(
            records,
            batch_size=batch_size,
            legacy_result=legacy_result,
            cancel_event=cancel_event,
        )
