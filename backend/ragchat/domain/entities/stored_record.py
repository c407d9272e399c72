"""Domain entities for records persisted in the vector collection."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SimilarityMetric(str, Enum):
    """Vector similarity functions supported by the collection."""

    DOT_PRODUCT = "dot_product"
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"


@dataclass
class CollectionSpec:
    """Vector field parameters of a collection, fixed at creation time."""

    name: str
    dimension: int
    metric: SimilarityMetric = SimilarityMetric.DOT_PRODUCT


@dataclass
class StoredRecord:
    """A chunk's text plus its embedding, as one document in the collection.

    ``similarity`` is only populated on records returned by a search.
    """

    text: str
    vector: list[float] = field(default_factory=list)
    record_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    similarity: float | None = None


def make_record_id(source_url: str, chunk_index: int) -> str:
    """Deterministic id so that re-ingesting a URL replaces its records."""
    digest = hashlib.sha256(f"{source_url}#{chunk_index}".encode("utf-8"))
    return digest.hexdigest()[:32]
