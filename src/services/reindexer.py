import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from src.repositories.faq import FaqRepository
from src.schemas.faq import MappingStatus
from src.services.opensearch.service import FaqSearchIndex

logger = logging.getLogger(__name__)


class FaqReindexer:
    """Service for rebuilding the FAQ search index from the FAQ database."""

    def __init__(self, search_index: FaqSearchIndex, batch_size: Optional[int] = None):
        self.search_index = search_index
        self.batch_size = batch_size

    def prepare_index(self, recreate: bool = False) -> MappingStatus:
        """
        Make sure the index and mapping exist before any document is sent.

        Schema failures propagate: nothing is indexed into a half-built index.
        """
        if recreate and self.search_index.schema.index_exists():
            logger.info(f"Recreating index {self.search_index.index_name}")
            self.search_index.drop_index()
        return self.search_index.ensure_index()

    def reindex(
        self,
        db_session: Session,
        languages: Optional[List[str]] = None,
        recreate: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        """
        Bulk index every active FAQ, one pass per language.

        Args:
            db_session: Session on the FAQ database
            languages: Restrict to these languages; all rows when empty
            recreate: Drop and rebuild the index first
            cancel_event: Stops before the next bulk flush once set

        Returns:
            Dictionary with reindex statistics
        """
        results: Dict[str, Any] = {
            "index_status": None,
            "batches": 0,
            "succeeded_batches": 0,
            "indexed": 0,
            "skipped": 0,
            "errors": [],
            "cancelled": False,
            "processing_time": 0,
        }
        start_time = datetime.now()

        results["index_status"] = self.prepare_index(recreate=recreate).value
        repository = FaqRepository(db_session)

        for lang in languages or [None]:
            scope = lang or "all languages"
            logger.info(f"Reindexing FAQs for {scope}...")

            outcome = self.search_index.bulk_index(
                repository.iter_records(lang=lang),
                batch_size=self.batch_size,
                legacy_result=False,
                cancel_event=cancel_event,
            )
            results["batches"] += outcome.total_batches
            results["succeeded_batches"] += outcome.succeeded_batches
            results["indexed"] += outcome.indexed
            results["skipped"] += outcome.skipped

            if outcome.first_failure is not None:
                failure = outcome.first_failure
                results["errors"].append(
                    f"{scope}: {outcome.failed_batches} failed batches, first was batch "
                    f"{failure.batch_number} ({failure.error_detail})"
                )
            if outcome.cancelled:
                results["cancelled"] = True
                break

        results["processing_time"] = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Reindex completed in {results['processing_time']:.1f}s: "
            f"{results['indexed']} indexed, {results['skipped']} inactive, "
            f"{results['succeeded_batches']}/{results['batches']} batches ok, "
            f"{len(results['errors'])} errors"
        )
        return results
