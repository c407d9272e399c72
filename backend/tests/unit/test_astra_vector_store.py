"""Unit tests for the Astra DB Data API vector store adapter."""

import json

import httpx
import pytest

from ragchat.domain.entities import CollectionSpec, SimilarityMetric, StoredRecord
from ragchat.domain.exceptions import CollectionConflictError, VectorStoreError
from ragchat.infrastructure.astra import AstraVectorStore

_ENDPOINT = "https://db-id-us-east1.apps.astra.datastax.com"


# ── Helpers ──


def _store(handler, captured: list[httpx.Request] | None = None) -> AstraVectorStore:
    def recording_handler(request: httpx.Request) -> httpx.Response:
        if captured is not None:
            captured.append(request)
        return handler(request)

    return AstraVectorStore(
        api_endpoint=_ENDPOINT,
        token="AstraCS:test",
        namespace="default_keyspace",
        collection="f1gpt",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(recording_handler)),
    )


def _ok(payload: dict):
    return lambda request: httpx.Response(200, json=payload)


def _command(request: httpx.Request) -> dict:
    return json.loads(request.content)


# ── Tests ──


@pytest.mark.asyncio
async def test_create_collection_sends_vector_options():
    captured: list[httpx.Request] = []
    store = _store(_ok({"status": {"ok": 1}}), captured)

    await store.create_collection(CollectionSpec(name="f1gpt", dimension=768))

    request = captured[0]
    assert request.url == f"{_ENDPOINT}/api/json/v1/default_keyspace"
    assert request.headers["token"] == "AstraCS:test"
    assert _command(request) == {
        "createCollection": {
            "name": "f1gpt",
            "options": {"vector": {"dimension": 768, "metric": "dot_product"}},
        }
    }


@pytest.mark.asyncio
async def test_create_collection_conflict_maps_to_conflict_error():
    store = _store(
        _ok(
            {
                "errors": [
                    {
                        "errorCode": "EXISTING_COLLECTION_DIFFERENT_SETTINGS",
                        "message": "Collection 'f1gpt' already exists with different settings",
                    }
                ]
            }
        )
    )

    with pytest.raises(CollectionConflictError) as exc_info:
        await store.create_collection(
            CollectionSpec(name="f1gpt", dimension=1536, metric=SimilarityMetric.COSINE)
        )

    assert exc_info.value.collection == "f1gpt"


@pytest.mark.asyncio
async def test_errors_array_in_200_response_raises():
    store = _store(_ok({"errors": [{"errorCode": "UNAUTHENTICATED", "message": "bad token"}]}))

    with pytest.raises(VectorStoreError) as exc_info:
        await store.count()

    assert exc_info.value.error_code == "UNAUTHENTICATED"
    assert exc_info.value.command == "countDocuments"
    assert not isinstance(exc_info.value, CollectionConflictError)


@pytest.mark.asyncio
async def test_http_error_status_raises():
    store = _store(lambda request: httpx.Response(503, text="Service Unavailable"))

    with pytest.raises(VectorStoreError) as exc_info:
        await store.find_similar([0.1, 0.2])

    assert "503" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_failure_raises_vector_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)

    with pytest.raises(VectorStoreError):
        await store.find_similar([0.1, 0.2])


@pytest.mark.asyncio
async def test_insert_returns_generated_id():
    captured: list[httpx.Request] = []
    store = _store(_ok({"status": {"insertedIds": ["abc123"]}}), captured)

    record_id = await store.insert(StoredRecord(text="Lap record", vector=[0.1, 0.2]))

    assert record_id == "abc123"
    assert _command(captured[0]) == {
        "insertOne": {"document": {"$vector": [0.1, 0.2], "text": "Lap record"}}
    }
    assert captured[0].url == f"{_ENDPOINT}/api/json/v1/default_keyspace/f1gpt"


@pytest.mark.asyncio
async def test_upsert_replaces_by_id():
    captured: list[httpx.Request] = []
    store = _store(_ok({"status": {"matchedCount": 0, "modifiedCount": 0}}), captured)
    record = StoredRecord(
        record_id="rec-1",
        text="Pole at Suzuka",
        vector=[0.3],
        metadata={"source_url": "https://example.com", "chunk_index": 0},
    )

    assert await store.upsert(record) == "rec-1"

    command = _command(captured[0])["findOneAndReplace"]
    assert command["filter"] == {"_id": "rec-1"}
    assert command["options"] == {"upsert": True}
    assert command["replacement"] == {
        "source_url": "https://example.com",
        "chunk_index": 0,
        "$vector": [0.3],
        "text": "Pole at Suzuka",
        "_id": "rec-1",
    }


@pytest.mark.asyncio
async def test_find_similar_sorts_by_vector_and_parses_documents():
    captured: list[httpx.Request] = []
    store = _store(
        _ok(
            {
                "data": {
                    "documents": [
                        {"_id": "a", "text": "first", "$similarity": 0.91, "source_url": "u"},
                        {"_id": "b", "text": "second", "$similarity": 0.87},
                    ]
                }
            }
        ),
        captured,
    )

    records = await store.find_similar([0.5, 0.5], limit=10)

    assert _command(captured[0]) == {
        "find": {
            "sort": {"$vector": [0.5, 0.5]},
            "options": {"limit": 10, "includeSimilarity": True},
        }
    }
    assert [r.text for r in records] == ["first", "second"]
    assert records[0].record_id == "a"
    assert records[0].similarity == pytest.approx(0.91)
    assert records[0].metadata == {"source_url": "u"}


@pytest.mark.asyncio
async def test_find_similar_on_empty_collection_returns_empty_list():
    store = _store(_ok({"data": {"documents": []}}))

    assert await store.find_similar([0.5]) == []


@pytest.mark.asyncio
async def test_count_reads_status_count():
    store = _store(_ok({"status": {"count": 42}}))

    assert await store.count() == 42
