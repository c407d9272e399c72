"""Domain entities for scraped pages and the chunks cut from them."""

from dataclasses import dataclass


@dataclass
class SourceDocument:
    """A scraped page: its URL and the tag-stripped body text.

    Only lives for the duration of an ingestion run.
    """

    url: str
    text: str


@dataclass
class Chunk:
    """A bounded window of a SourceDocument's text, prepared for embedding."""

    text: str
    index: int
    source_url: str
