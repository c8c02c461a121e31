import logging
from typing import Any, Dict, Optional

from src.config import Settings, get_settings
from src.db.factory import make_database
from src.db.interfaces.base import BaseDatabase
from src.exceptions import TransportError
from src.services.opensearch.factory import make_faq_search_index
from src.services.opensearch.service import FaqSearchIndex
from src.services.reindexer import FaqReindexer


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def run_migration(
    settings: Optional[Settings] = None,
    search_index: Optional[FaqSearchIndex] = None,
    database: Optional[BaseDatabase] = None,
    reindex: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    One-shot schema setup for the FAQ search index, optionally followed by a full reindex.

    This is the only place schema setup should run; concurrent setup from
    several processes races on index creation.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    reindex = settings.reindex_on_migrate if reindex is None else reindex

    logger.info(f"Starting {settings.service_name} migration ({settings.environment})...")
    search_index = search_index or make_faq_search_index(settings)

    if not search_index.schema.client.health_check():
        raise TransportError(f"OpenSearch at {search_index.schema.client.host or 'configured host'} is not reachable")

    if not reindex:
        status = search_index.ensure_index()
        logger.info(f"Index {search_index.index_name}: {status.value}")
        return {"index_status": status.value}

    database = database or make_database(settings)
    try:
        with database.get_session() as session:
            reindexer = FaqReindexer(search_index, batch_size=settings.opensearch.bulk_batch_size)
            return reindexer.reindex(session, languages=settings.reindex_languages)
    finally:
        database.teardown()
        logger.info("Migration complete")


if __name__ == "__main__":
    run_migration()
