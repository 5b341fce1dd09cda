"""Search engine response model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from searchfeed.models.document import Record

FIRST_INDEX_KEY = "firstIndex"
"""Metadata key for the first result's (provider-side) index."""

RESULTS_RETURNED_KEY = "resultsReturned"
"""Metadata key for the number of results actually returned."""

COMPRESSION_KEY = "compression"
"""Metadata key for the content encoding used on the wire."""

ERROR_KEY = "error"
"""Metadata key for an error message the service embedded in the XML body."""

GZIP = "gzip"
UNCOMPRESSED = "(uncompressed)"


class SearchEngineResponse(BaseModel):
    """Results of a single request to a search service.

    A fresh instance is created per call and is owned by the caller.
    """

    results: list[Record] = Field(default_factory=list, description="Records in provider ranking order")
    results_total: int = Field(default=0, description="Total number of matching results declared by the provider")
    metadata: dict[str, str] = Field(default_factory=dict, description="Response metadata (firstIndex, compression, ...)")

    @property
    def compression(self) -> str | None:
        return self.metadata.get(COMPRESSION_KEY)

    @property
    def error(self) -> str | None:
        return self.metadata.get(ERROR_KEY)
