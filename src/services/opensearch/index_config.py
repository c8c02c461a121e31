import copy
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict
from src.config import OpenSearchSettings
from src.exceptions import ConfigurationError

AUTOCOMPLETE_ANALYZER = "autocomplete"
AUTOCOMPLETE_FILTER = "autocomplete_filter"
STEMMER_FILTER = "language_stemmer"

# Text fields analyzed with edge n-grams at index time, plain standard at search time
_AUTOCOMPLETE_TEXT = {
    "type": "text",
    "analyzer": AUTOCOMPLETE_ANALYZER,
    "search_analyzer": "standard",
}

FAQ_FIELD_MAPPINGS: Dict[str, Dict[str, Any]] = {
    "id": {"type": "integer"},
    "question": dict(_AUTOCOMPLETE_TEXT),
    "answer": dict(_AUTOCOMPLETE_TEXT),
    "keywords": dict(_AUTOCOMPLETE_TEXT),
    "categories": dict(_AUTOCOMPLETE_TEXT),
}


def resolve_stemmer(language: str, stemmer_languages: Mapping[str, str]) -> str:
    """Look up the stemmer filter name for a language code such as ``de`` or ``pt-BR``."""
    code = language.strip().lower().replace("_", "-")
    if code in stemmer_languages:
        return stemmer_languages[code]
    base = code.split("-", 1)[0]
    if base in stemmer_languages:
        return stemmer_languages[base]
    raise ConfigurationError(f"No stemmer configured for language '{language}'")


class AnalyzerSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    tokenizer: str = "standard"
    min_gram: int = 1
    max_gram: int = 20
    stemmer_language: str = "english"

    def to_analysis(self) -> Dict[str, Any]:
        return {
            "filter": {
                AUTOCOMPLETE_FILTER: {
                    "type": "edge_ngram",
                    "min_gram": self.min_gram,
                    "max_gram": self.max_gram,
                },
                STEMMER_FILTER: {
                    "type": "stemmer",
                    "name": self.stemmer_language,
                },
            },
            "analyzer": {
                AUTOCOMPLETE_ANALYZER: {
                    "type": "custom",
                    "tokenizer": self.tokenizer,
                    "filter": ["lowercase", AUTOCOMPLETE_FILTER, STEMMER_FILTER],
                },
            },
        }


class IndexDefinition(BaseModel):
    """Index name, sharding and analysis settings; fixed once the index exists."""

    model_config = ConfigDict(frozen=True)

    index_name: str
    document_type: str = "faqs"
    shard_count: int = 2
    replica_count: int = 0
    stemmer_language: str = "english"

    @classmethod
    def from_settings(cls, settings: OpenSearchSettings) -> "IndexDefinition":
        return cls(
            index_name=settings.index_name,
            document_type=settings.document_type,
            shard_count=settings.number_of_shards,
            replica_count=settings.number_of_replicas,
            stemmer_language=resolve_stemmer(settings.default_language, settings.stemmer_languages),
        )

    @property
    def analyzer(self) -> AnalyzerSpec:
        return AnalyzerSpec(stemmer_language=self.stemmer_language)

    def to_body(self) -> Dict[str, Any]:
        """Request body for index creation (settings only, mapping is pushed separately)."""
        return {
            "settings": {
                "number_of_shards": self.shard_count,
                "number_of_replicas": self.replica_count,
                "analysis": self.analyzer.to_analysis(),
            }
        }

    def mapping_body(self) -> Dict[str, Any]:
        # Mapping types are gone from OpenSearch, so the type name only survives as metadata
        return {
            "_meta": {"document_type": self.document_type},
            "_source": {"enabled": True},
            "properties": copy.deepcopy(FAQ_FIELD_MAPPINGS),
        }
