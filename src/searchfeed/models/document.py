"""Record model — One search result as delivered by the remote service.

The set of fields is whatever the remote schema provides; the parser copies
each child element of a result into ``fields`` under the name the
``ResponseSchema`` maps it to.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Record(BaseModel):
    """A single search result."""

    fields: dict[str, str] = Field(default_factory=dict, description="Field name to text, in document order")

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.fields.get(name, default)

    @property
    def title(self) -> str | None:
        return self.fields.get("title")

    @property
    def url(self) -> str | None:
        return self.fields.get("url")

    @property
    def snippet(self) -> str | None:
        return self.fields.get("snippet")
