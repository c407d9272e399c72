"""Astra DB vector store — implements the VectorStore interface over the Data API.

Every operation is one JSON command POSTed to the Data API:

    POST {endpoint}/api/json/v1/{namespace}                 createCollection
    POST {endpoint}/api/json/v1/{namespace}/{collection}    insertOne,
                                                            findOneAndReplace,
                                                            find, countDocuments

The Data API reports command failures in an ``errors`` array, usually with
HTTP 200, so both the status code and the body are checked.
"""

import logging
from typing import Any

import httpx

from ragchat.application.interfaces.vector_store import VectorStore
from ragchat.domain.entities import CollectionSpec, StoredRecord
from ragchat.domain.exceptions import CollectionConflictError, VectorStoreError

logger = logging.getLogger(__name__)

_API_PATH = "api/json/v1"
_CONFLICT_ERROR_CODE = "EXISTING_COLLECTION_DIFFERENT_SETTINGS"
_RESERVED_FIELDS = frozenset({"_id", "$vector", "$similarity", "text"})


class AstraVectorStore(VectorStore):
    """Infrastructure adapter — stores records in an Astra DB vector collection."""

    def __init__(
        self,
        api_endpoint: str,
        token: str,
        namespace: str,
        collection: str,
        timeout: float = 120.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_endpoint = api_endpoint.rstrip("/")
        self._token = token
        self._namespace = namespace
        self._collection = collection
        self._timeout = timeout
        self._http_client = http_client

    @property
    def collection_name(self) -> str:
        return self._collection

    def _get_headers(self) -> dict[str, str]:
        return {
            "Token": self._token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _namespace_url(self) -> str:
        return f"{self._api_endpoint}/{_API_PATH}/{self._namespace}"

    def _collection_url(self) -> str:
        return f"{self._namespace_url()}/{self._collection}"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _command(self, url: str, name: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST one Data API command and return the decoded response."""
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(
                    url, headers=self._get_headers(), json={name: body}
                )
            except httpx.HTTPError as e:
                raise VectorStoreError(name, f"{type(e).__name__}: {e}") from e

            if response.status_code != 200:
                raise VectorStoreError(
                    name, f"HTTP {response.status_code}: {response.text[:500]}"
                )

            data = response.json()
            errors = data.get("errors") or []
            if errors:
                first = errors[0]
                raise VectorStoreError(
                    name,
                    first.get("message", "Unknown Data API error"),
                    error_code=first.get("errorCode"),
                )
            return data

        finally:
            if should_close:
                await client.aclose()

    async def create_collection(self, spec: CollectionSpec) -> None:
        body = {
            "name": spec.name,
            "options": {
                "vector": {
                    "dimension": spec.dimension,
                    "metric": spec.metric.value,
                },
            },
        }
        try:
            await self._command(self._namespace_url(), "createCollection", body)
        except VectorStoreError as e:
            if e.error_code == _CONFLICT_ERROR_CODE:
                raise CollectionConflictError(spec.name, e.message) from e
            raise

        logger.info(
            "Collection '%s' ready (dimension=%d, metric=%s)",
            spec.name,
            spec.dimension,
            spec.metric.value,
        )

    async def insert(self, record: StoredRecord) -> str:
        data = await self._command(
            self._collection_url(),
            "insertOne",
            {"document": self._to_document(record)},
        )
        inserted_ids = data.get("status", {}).get("insertedIds") or []
        if not inserted_ids:
            raise VectorStoreError("insertOne", "No insertedIds in response")
        return str(inserted_ids[0])

    async def upsert(self, record: StoredRecord) -> str:
        if record.record_id is None:
            return await self.insert(record)

        await self._command(
            self._collection_url(),
            "findOneAndReplace",
            {
                "filter": {"_id": record.record_id},
                "replacement": self._to_document(record),
                "options": {"upsert": True},
            },
        )
        return record.record_id

    async def find_similar(
        self, vector: list[float], *, limit: int = 10
    ) -> list[StoredRecord]:
        data = await self._command(
            self._collection_url(),
            "find",
            {
                "sort": {"$vector": vector},
                "options": {"limit": limit, "includeSimilarity": True},
            },
        )
        documents = data.get("data", {}).get("documents") or []
        return [self._to_record(doc) for doc in documents]

    async def count(self) -> int:
        data = await self._command(self._collection_url(), "countDocuments", {})
        return int(data.get("status", {}).get("count", 0))

    @staticmethod
    def _to_document(record: StoredRecord) -> dict[str, Any]:
        document: dict[str, Any] = {
            **record.metadata,
            "$vector": record.vector,
            "text": record.text,
        }
        if record.record_id is not None:
            document["_id"] = record.record_id
        return document

    @staticmethod
    def _to_record(document: dict[str, Any]) -> StoredRecord:
        similarity = document.get("$similarity")
        return StoredRecord(
            record_id=str(document["_id"]) if "_id" in document else None,
            text=document.get("text", ""),
            metadata={k: v for k, v in document.items() if k not in _RESERVED_FIELDS},
            similarity=float(similarity) if similarity is not None else None,
        )
