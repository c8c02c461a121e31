from .bulk import BulkBatch, BulkSynchronizer
from .client import SearchServiceClient
from .documents import DocumentSynchronizer
from .factory import make_faq_search_index, make_opensearch_client, make_opensearch_client_fresh
from .index_config import AnalyzerSpec, IndexDefinition
from .projector import DocumentProjector
from .schema import IndexSchemaManager
from .service import FaqSearchIndex

__all__ = [
    "AnalyzerSpec",
    "BulkBatch",
    "BulkSynchronizer",
    "DocumentProjector",
    "DocumentSynchronizer",
    "FaqSearchIndex",
    "IndexDefinition",
    "IndexSchemaManager",
    "SearchServiceClient",
    "make_faq_search_index",
    "make_opensearch_client",
    "make_opensearch_client_fresh",
]
