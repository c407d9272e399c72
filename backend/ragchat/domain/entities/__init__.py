from .chat_message import ChatMessage
from .source_document import SourceDocument, Chunk
from .stored_record import CollectionSpec, SimilarityMetric, StoredRecord, make_record_id
from .ingestion_report import IngestionReport

__all__ = [
    "ChatMessage",
    "SourceDocument",
    "Chunk",
    "CollectionSpec",
    "SimilarityMetric",
    "StoredRecord",
    "make_record_id",
    "IngestionReport",
]
