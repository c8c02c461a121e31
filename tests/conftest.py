from __future__ import annotations

import copy
import os
from typing import Any

import pytest
from opensearchpy.exceptions import ConnectionError as OSConnectionError
from opensearchpy.exceptions import NotFoundError, RequestError

from src.config import OpenSearchSettings, Settings
from src.db.interfaces.postgresql import Base, PostgreSQLDatabase, PostgreSQLSettings
from src.models.faq import Faq
from src.services.opensearch.client import SearchServiceClient
from src.services.opensearch.factory import make_faq_search_index
from src.services.text.normalizer import HtmlTextNormalizer


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.getenv("OPENSEARCH_RUN_INTEGRATION") == "1":
        return

    skip_integration = pytest.mark.skip(
        reason="Set OPENSEARCH_RUN_INTEGRATION=1 to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class FakeIndices:
    def __init__(self, cluster: "FakeOpenSearch"):
        self.cluster = cluster
        self.calls: list[tuple[str, dict]] = []
        self.acknowledge_mapping = True

    def exists(self, **kwargs):
        self.calls.append(("exists", kwargs))
        return kwargs["index"] in self.cluster.data

    def create(self, **kwargs):
        self.calls.append(("create", kwargs))
        index = kwargs["index"]
        if index in self.cluster.data:
            raise RequestError(
                400,
                "resource_already_exists_exception",
                {"error": {"type": "resource_already_exists_exception", "index": index}},
            )
        body = kwargs.get("body") or {}
        self.cluster.data[index] = {
            "settings": copy.deepcopy(body.get("settings", {})),
            "mappings": copy.deepcopy(body.get("mappings", {})),
            "docs": {},
        }
        return {"acknowledged": True, "shards_acknowledged": True, "index": index}

    def get_mapping(self, **kwargs):
        self.calls.append(("get_mapping", kwargs))
        index = self.cluster.require_index(kwargs["index"])
        return {kwargs["index"]: {"mappings": copy.deepcopy(index["mappings"])}}

    def put_mapping(self, **kwargs):
        self.calls.append(("put_mapping", kwargs))
        if not self.acknowledge_mapping:
            return {"acknowledged": False}
        index = self.cluster.require_index(kwargs["index"])
        index["mappings"].update(copy.deepcopy(kwargs["body"]))
        return {"acknowledged": True}

    def delete(self, **kwargs):
        self.calls.append(("delete", kwargs))
        self.cluster.require_index(kwargs["index"])
        del self.cluster.data[kwargs["index"]]
        return {"acknowledged": True}

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeClusterApi:
    def __init__(self):
        self.status = "green"

    def health(self, **kwargs):
        return {"status": self.status}


class FakeOpenSearch:
    """In-memory stand-in for the opensearch-py client surface the adapter uses."""

    def __init__(self):
        self.data: dict[str, dict[str, Any]] = {}
        self.indices = FakeIndices(self)
        self.cluster = FakeClusterApi()
        self.bulk_calls: list[list[dict]] = []
        self.failing_bulk_calls: set[int] = set()  # 1-based call numbers raising a transport fault
        self.rejected_ids: set[str] = set()

    def require_index(self, name: str) -> dict[str, Any]:
        if name not in self.data:
            raise NotFoundError(404, "index_not_found_exception", {"error": {"index": name}})
        return self.data[name]

    def docs(self, name: str) -> dict[str, dict]:
        return self.require_index(name)["docs"]

    def index(self, index, id, body, **params):
        docs = self.docs(index)
        key = str(id)
        result = "updated" if key in docs else "created"
        docs[key] = copy.deepcopy(body)
        return {"_index": index, "_id": key, "result": result}

    def update(self, index, id, body, **params):
        docs = self.docs(index)
        key = str(id)
        if key not in docs:
            raise NotFoundError(
                404,
                "document_missing_exception",
                {"error": {"type": "document_missing_exception", "reason": f"[{key}]: document missing"}},
            )
        docs[key].update(copy.deepcopy(body["doc"]))
        return {"_index": index, "_id": key, "result": "updated"}

    def delete(self, index, id, **params):
        docs = self.docs(index)
        key = str(id)
        if key not in docs:
            raise NotFoundError(404, "not_found", {"_index": index, "_id": key, "result": "not_found"})
        del docs[key]
        return {"_index": index, "_id": key, "result": "deleted"}

    def bulk(self, body, **params):
        self.bulk_calls.append(copy.deepcopy(body))
        if len(self.bulk_calls) in self.failing_bulk_calls:
            raise OSConnectionError("N/A", "Read timed out", Exception("timeout"))

        items = []
        errors = False
        for action, source in zip(body[0::2], body[1::2]):
            meta = action["index"]
            key = str(meta["_id"])
            if key in self.rejected_ids:
                errors = True
                items.append({"index": {
                    "_index": meta["_index"],
                    "_id": key,
                    "status": 400,
                    "error": {"type": "mapper_parsing_exception", "reason": "failed to parse"},
                }})
                continue
            docs = self.docs(meta["_index"])
            result = "updated" if key in docs else "created"
            docs[key] = copy.deepcopy(source)
            items.append({"index": {"_index": meta["_index"], "_id": key, "status": 201, "result": result}})
        return {"took": 3, "errors": errors, "items": items}

    def batch_sizes(self) -> list[int]:
        return [len(call) // 2 for call in self.bulk_calls]

    def batch_keys(self) -> list[list[int]]:
        return [[line["index"]["_id"] for line in call[0::2]] for call in self.bulk_calls]


def faq_row(n: int, active: str = "yes", **overrides) -> dict:
    row = {
        "id": n,
        "solution_id": 1000 + n,
        "lang": "en",
        "title": f"Question {n}?",
        "content": f"<p>Answer <b>{n}</b></p>",
        "keywords": f"kw{n}",
        "category_id": n % 5,
        "active": active,
    }
    row.update(overrides)
    return row


def faq_rows(count: int, start: int = 1) -> list[dict]:
    return [faq_row(n) for n in range(start, start + count)]


@pytest.fixture
def opensearch_settings() -> OpenSearchSettings:
    return OpenSearchSettings(
        host="http://localhost:9200",
        index_name="faq-test",
        document_type="faqs",
        number_of_shards=2,
        number_of_replicas=0,
        default_language="de",
    )


@pytest.fixture
def settings(opensearch_settings) -> Settings:
    return Settings(opensearch=opensearch_settings)


@pytest.fixture
def fake_opensearch() -> FakeOpenSearch:
    return FakeOpenSearch()


@pytest.fixture
def search_client(fake_opensearch) -> SearchServiceClient:
    return SearchServiceClient(fake_opensearch, host="http://localhost:9200")


@pytest.fixture
def normalizer() -> HtmlTextNormalizer:
    return HtmlTextNormalizer(features="html.parser")


@pytest.fixture
def search_index(settings, search_client, normalizer):
    return make_faq_search_index(settings, client=search_client, normalizer=normalizer)


@pytest.fixture
def ready_index(search_index):
    search_index.create_index()
    return search_index


@pytest.fixture
def faq_database(tmp_path):
    database = PostgreSQLDatabase(PostgreSQLSettings(database_url=f"sqlite:///{tmp_path / 'faq.db'}"))
    database.startup()
    Base.metadata.create_all(bind=database.engine)
    yield database
    database.teardown()


def add_faqs(database, rows: list[dict]) -> None:
    with database.get_session() as session:
        session.add_all([Faq(**row) for row in rows])
        session.commit()
