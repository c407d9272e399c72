"""Sliding-window text splitter.

Cuts text into windows of ``chunk_size`` characters, each starting
``chunk_size - chunk_overlap`` characters after the previous one. The
last window ends at the end of the text and may be shorter.
"""

from ragchat.domain.entities import Chunk, SourceDocument

_DEFAULT_CHUNK_SIZE = 512
_DEFAULT_CHUNK_OVERLAP = 100


class TextSplitter:
    """Deterministic fixed-size splitter with a fixed overlap."""

    def __init__(
        self,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = _DEFAULT_CHUNK_OVERLAP,
    ):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size), got {chunk_overlap} "
                f"for chunk_size={chunk_size}"
            )
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split_text(self, text: str) -> list[str]:
        """Split ``text`` into overlapping windows.

        Consecutive chunks share exactly ``chunk_overlap`` characters.
        """
        if not text:
            return []

        step = self._chunk_size - self._chunk_overlap
        chunks: list[str] = []
        start = 0
        while True:
            end = start + self._chunk_size
            if end >= len(text):
                chunks.append(text[start:])
                return chunks
            chunks.append(text[start:end])
            start += step

    def merge_chunks(self, chunks: list[str]) -> str:
        """Rebuild the original text from chunks produced by ``split_text``."""
        if not chunks:
            return ""
        return chunks[0] + "".join(c[self._chunk_overlap :] for c in chunks[1:])

    def split_document(self, document: SourceDocument) -> list[Chunk]:
        """Split a scraped document into indexed chunks."""
        return [
            Chunk(text=part, index=i, source_url=document.url)
            for i, part in enumerate(self.split_text(document.text))
        ]
