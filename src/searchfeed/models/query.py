"""Query models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QueryType(str, Enum):
    """How the service interprets the query words."""

    ALL = "ALL"
    """Results containing all query terms."""

    ANY = "ANY"
    """Results containing one or more of the query terms."""

    PHRASE = "PHRASE"
    """Results containing the query terms as a phrase."""

    def __str__(self) -> str:
        return self.name.lower()


class Query(BaseModel):
    """A single search query. Immutable for the lifetime of a request."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Query string as typed by the user", min_length=1)
    query_type: QueryType = Field(default=QueryType.ALL, description="Query words interpretation")
    language: str | None = Field(default=None, description="Restrict results to this language code (None = any)")
