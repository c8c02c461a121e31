import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from opensearchpy import OpenSearch
from src.config import Settings, get_settings
from src.services.text import TextNormalizer, make_text_normalizer

from .bulk import BulkSynchronizer
from .client import SearchServiceClient
from .documents import DocumentSynchronizer
from .index_config import IndexDefinition
from .projector import DocumentProjector
from .schema import IndexSchemaManager
from .service import FaqSearchIndex

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def make_opensearch_client() -> SearchServiceClient:
    """Factory function to create the cached, shared OpenSearch client."""
    return make_opensearch_client_fresh(get_settings())


def make_opensearch_client_fresh(settings: Optional[Settings] = None, host: Optional[str] = None) -> SearchServiceClient:
    """Factory function to create a fresh (non-cached) OpenSearch client."""
    if settings is None:
        settings = get_settings()
    opensearch = settings.opensearch
    opensearch_host = host or opensearch.host

    kwargs: Dict[str, Any] = {
        "hosts": [opensearch_host],
        "http_compress": True,
        "use_ssl": opensearch_host.startswith("https"),
        "verify_certs": opensearch.verify_certs,
        "ssl_assert_hostname": False,
        "ssl_show_warn": False,
        "timeout": opensearch.timeout,
        "max_retries": opensearch.max_retries,
        "retry_on_timeout": False,
    }
    if opensearch.http_auth:
        kwargs["http_auth"] = opensearch.http_auth

    logger.info(f"OpenSearch client initialized with host: {opensearch_host}")
    return SearchServiceClient(OpenSearch(**kwargs), host=opensearch_host)


def make_faq_search_index(
    settings: Optional[Settings] = None,
    client: Optional[SearchServiceClient] = None,
    normalizer: Optional[TextNormalizer] = None,
) -> FaqSearchIndex:
    """Wire the schema manager and synchronizers for the configured FAQ index."""
    if client is None:
        # the shared client is only valid for the environment's settings
        client = make_opensearch_client() if settings is None else make_opensearch_client_fresh(settings)
    if settings is None:
        settings = get_settings()
    opensearch = settings.opensearch
    normalizer = normalizer or make_text_normalizer(language=opensearch.default_language)

    definition = IndexDefinition.from_settings(opensearch)
    projector = DocumentProjector(normalizer)

    return FaqSearchIndex(
        schema=IndexSchemaManager(client, definition),
        documents=DocumentSynchronizer(client, projector, definition.index_name),
        bulk=BulkSynchronizer(
            client,
            projector,
            definition.index_name,
            batch_size=opensearch.bulk_batch_size,
            legacy_result=opensearch.legacy_bulk_result,
        ),
    )
