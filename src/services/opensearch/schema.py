import logging
from typing import Any, Dict

from src.schemas.faq import MappingStatus

from .client import SearchServiceClient
from .index_config import IndexDefinition

logger = logging.getLogger(__name__)


class IndexSchemaManager:
    """
    Owns index existence and the FAQ mapping/analyzer definition.

    Schema setup is a check-then-set sequence that is not atomic across
    processes. Run it once from a migration step, never from request paths.
    """

    def __init__(self, client: SearchServiceClient, definition: IndexDefinition):
        self.client = client
        self.definition = definition

    @property
    def index_name(self) -> str:
        return self.definition.index_name

    def index_exists(self) -> bool:
        return self.client.index_exists(self.index_name)

    def create_index(self) -> bool:
        """
        Create the index with the autocomplete analyzer, then push the mapping.

        Returns:
            True unless the mapping push was not acknowledged

        Raises:
            SchemaError: if the service rejects index creation (e.g. the index already exists)
        """
        logger.info(
            f"Creating index {self.index_name} "
            f"(shards={self.definition.shard_count}, replicas={self.definition.replica_count}, "
            f"stemmer={self.definition.stemmer_language})"
        )
        self.client.create_index(self.index_name, self.definition.to_body())
        return self.ensure_mapping() is not MappingStatus.FAILED

    def ensure_mapping(self) -> MappingStatus:
        """Push the FAQ mapping if the index has no mapped properties yet."""
        if self._mapped_properties(self.get_mapping()):
            logger.info(f"Mapping already present on {self.index_name}")
            return MappingStatus.ALREADY_PRESENT

        response = self.client.put_mapping(self.index_name, self.definition.mapping_body())
        if response.get("acknowledged") is True:
            logger.info(f"Mapping created on {self.index_name}")
            return MappingStatus.CREATED

        logger.error(f"Mapping push on {self.index_name} not acknowledged: {response}")
        return MappingStatus.FAILED

    put_mapping = ensure_mapping

    def ensure_index(self) -> MappingStatus:
        """Create the index when missing, otherwise only make sure the mapping is there."""
        if not self.index_exists():
            if not self.create_index():
                return MappingStatus.FAILED
            return MappingStatus.CREATED
        return self.ensure_mapping()

    def get_mapping(self) -> Dict[str, Any]:
        return self.client.get_mapping(self.index_name)

    def drop_index(self) -> Dict[str, Any]:
        logger.warning(f"Dropping index {self.index_name}")
        return self.client.delete_index(self.index_name)

    def _mapped_properties(self, response: Dict[str, Any]) -> Dict[str, Any]:
        # Keyed by the concrete index name, which differs from ours when we address an alias
        entry = response.get(self.index_name)
        if entry is None and len(response) == 1:
            entry = next(iter(response.values()))
        mappings = (entry or {}).get("mappings") or {}
        return mappings.get("properties") or {}
