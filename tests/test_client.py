from __future__ import annotations

import pytest
from opensearchpy.exceptions import AuthenticationException, ConflictError, RequestError
from opensearchpy.exceptions import ConnectionError as OSConnectionError

from src.exceptions import DocumentNotFoundError, SchemaError, TransportError
from src.services.opensearch.client import SearchServiceClient


class RecordingClient:
    def __init__(self):
        self.calls = []

    def index(self, **kwargs):
        self.calls.append(("index", kwargs))
        return {"result": "created"}

    def update(self, **kwargs):
        self.calls.append(("update", kwargs))
        return {"result": "updated"}

    def delete(self, **kwargs):
        self.calls.append(("delete", kwargs))
        return {"result": "deleted"}


class RaisingClient:
    def __init__(self, exc):
        self.exc = exc

    def index(self, **kwargs):
        raise self.exc

    def bulk(self, **kwargs):
        raise self.exc


def test_document_params_only_send_refresh_when_set():
    raw = RecordingClient()
    client = SearchServiceClient(raw)

    client.index_document("faq", 7, {"question": "q"})
    client.update_document("faq", 7, {"doc": {"question": "q2"}}, refresh="wait_for")
    client.delete_document("faq", 7)

    assert raw.calls == [
        ("index", {"index": "faq", "id": 7, "body": {"question": "q"}}),
        ("update", {"index": "faq", "id": 7, "body": {"doc": {"question": "q2"}}, "refresh": "wait_for"}),
        ("delete", {"index": "faq", "id": 7}),
    ]


def test_existing_index_is_a_schema_error(search_client):
    search_client.create_index("faq", {"settings": {}})

    with pytest.raises(SchemaError) as excinfo:
        search_client.create_index("faq", {"settings": {}})

    assert excinfo.value.status_code == 400
    assert isinstance(excinfo.value.__cause__, RequestError)


def test_mapping_of_missing_index_is_a_schema_error(search_client):
    with pytest.raises(SchemaError) as excinfo:
        search_client.get_mapping("missing")
    assert excinfo.value.status_code == 404


def test_missing_document_is_not_found(search_client):
    search_client.create_index("faq", {"settings": {}})

    with pytest.raises(DocumentNotFoundError) as excinfo:
        search_client.update_document("faq", 1, {"doc": {"question": "q"}})
    assert excinfo.value.status_code == 404

    with pytest.raises(DocumentNotFoundError):
        search_client.delete_document("faq", 1)


@pytest.mark.parametrize(
    "exc, status",
    [
        (AuthenticationException(401, "security_exception", {}), 401),
        (ConflictError(409, "version_conflict_engine_exception", {}), 409),
        (OSConnectionError("N/A", "Connection refused", Exception("refused")), "N/A"),
    ],
)
def test_other_document_faults_are_transport_errors(exc, status):
    client = SearchServiceClient(RaisingClient(exc))

    with pytest.raises(TransportError) as excinfo:
        client.index_document("faq", 1, {})

    assert excinfo.value.status_code == status
    assert excinfo.value.__cause__ is exc


def test_bulk_connection_failure_is_transport_error():
    client = SearchServiceClient(RaisingClient(OSConnectionError("N/A", "timeout", Exception())))

    with pytest.raises(TransportError):
        client.bulk([{"index": {"_index": "faq", "_id": 1}}, {"id": 1}])


def test_health_check(fake_opensearch, search_client):
    assert search_client.health_check() is True

    fake_opensearch.cluster.status = "red"
    assert search_client.health_check() is False


def test_health_check_unreachable():
    class Down:
        class cluster:
            @staticmethod
            def health():
                raise OSConnectionError("N/A", "Connection refused", Exception())

    assert SearchServiceClient(Down()).health_check() is False
