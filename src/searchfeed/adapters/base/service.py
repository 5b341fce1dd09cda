"""Service variants — Request construction and response schema per search service.

A ``ServiceVariant`` is the strategy injected into a source adapter. It knows
how to turn a query and a provider-side pagination window into request
parameters, where to send them, and which XML elements carry the results.
Variants must be stateless; one instance is shared by all concurrent calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict, Field

from searchfeed.models.query import Query


class ServiceMetadata(BaseModel):
    """Static paging limits of a search service."""

    model_config = ConfigDict(frozen=True)

    results_per_page: int = Field(default=50, ge=1, description="Maximum results the service returns per request")
    results_total_limit: int = Field(default=1000, ge=1, description="Maximum results reachable by paging")


class ResponseSchema(BaseModel):
    """Element and attribute names of the service's XML response.

    Matching is done on local names, so namespaced documents work without
    declaring the namespace here.
    """

    model_config = ConfigDict(frozen=True)

    result_set: str = Field(default="ResultSet", description="Results-summary element")
    total_attribute: str = Field(default="totalResultsAvailable", description="Declared total result count")
    returned_attribute: str = Field(default="totalResultsReturned", description="Declared count of results in this page")
    first_index_attribute: str = Field(default="firstResultPosition", description="Provider index of the first result")
    result: str = Field(default="Result", description="Element wrapping a single result")
    error: str = Field(default="Error", description="Element wrapping an in-band error")
    error_message: str = Field(default="Message", description="Error message element inside the error element")
    fields: dict[str, str] = Field(
        default_factory=lambda: {
            "Title": "title",
            "Summary": "snippet",
            "Url": "url",
            "ClickUrl": "click_url",
            "DisplayUrl": "display_url",
        },
        description="Result child element to record field name; unmapped children keep their element name",
    )

    def field_name(self, element: str) -> str:
        return self.fields.get(element, element)


class ServiceVariant(ABC):
    """Builds requests for one particular search service."""

    metadata: ServiceMetadata = ServiceMetadata()
    schema: ResponseSchema = ResponseSchema()

    @abstractmethod
    def build_params(self, query: Query, start: int, count: int) -> list[tuple[str, str]]:
        """Build the provider-specific request parameters.

        Args:
            query: The query to send.
            start: Provider-side (1-based) index of the first result.
            count: Number of results to request, already clamped to the page size.

        Returns:
            Ordered (name, value) pairs.
        """

    @abstractmethod
    def service_uri(self) -> str:
        """Return the fixed endpoint URI of the service."""


class ConfiguredServiceVariant(ServiceVariant):
    """A service variant whose endpoint and parameter names come from settings.

    Produces ``appid``, ``query``, ``start``, ``results``, ``type`` and, when
    the query carries one, ``language`` (names configurable).

    Args:
        endpoint: Service URI.
        appid: Application ID sent with every request.
        metadata: Paging limits of the service.
        schema: XML response schema.
        param_names: Overrides for the default parameter names.
    """

    DEFAULT_PARAM_NAMES: dict[str, str] = {
        "appid": "appid",
        "query": "query",
        "start": "start",
        "results": "results",
        "type": "type",
        "language": "language",
    }

    def __init__(
        self,
        endpoint: str,
        appid: str = "",
        metadata: ServiceMetadata | None = None,
        schema: ResponseSchema | None = None,
        param_names: dict[str, str] | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._appid = appid
        self._names = {**self.DEFAULT_PARAM_NAMES, **(param_names or {})}
        if metadata is not None:
            self.metadata = metadata
        if schema is not None:
            self.schema = schema

    def build_params(self, query: Query, start: int, count: int) -> list[tuple[str, str]]:
        names = self._names
        params = [
            (names["appid"], self._appid),
            (names["query"], query.text),
            (names["start"], str(start)),
            (names["results"], str(count)),
            (names["type"], str(query.query_type)),
        ]
        if query.language:
            params.append((names["language"], query.language))
        return params

    def service_uri(self) -> str:
        return self._endpoint
