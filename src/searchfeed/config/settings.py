"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified, via ``Settings.from_yaml``)
  2. Environment variables (SEARCHFEED_ prefix)
  3. Default values

Nested sections are merged field by field, so an environment variable still
fills any field the YAML file leaves unset.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from searchfeed.adapters.xml.http import DEFAULT_TIMEOUT, USER_AGENT
from searchfeed.models.query import QueryType


class HttpSettings(BaseModel):
    """HTTP transport configuration."""

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Connect/read timeout in seconds")
    user_agent: str = Field(default=USER_AGENT, description="User-Agent header sent with every request")


class ServiceSettings(BaseModel):
    """Search service configuration.

    Describes the endpoint, the request parameters and the paging limits
    of the service the XML source talks to.
    """

    endpoint: str = Field(default="", description="Service URI")
    appid: str = Field(default="searchfeed", description="Application ID required by the service")
    query_type: QueryType = Field(default=QueryType.ALL, description="Default query words interpretation")
    language: str | None = Field(default=None, description="Default result language (None = any)")
    results_per_page: int = Field(default=50, ge=1, description="Maximum results per request")
    results_total_limit: int = Field(default=1000, ge=1, description="Maximum results reachable by paging")
    param_names: dict[str, str] = Field(default_factory=dict, description="Overrides for request parameter names")
    response_schema: dict[str, Any] = Field(default_factory=dict, description="Overrides for XML element/attribute names")

    @field_validator("query_type", mode="before")
    @classmethod
    def _parse_query_type(cls, v: Any) -> Any:
        """Accept query types in any case (``all``, ``PHRASE``)."""
        if isinstance(v, str):
            return v.upper()
        return v


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SEARCHFEED_ prefix.
    Nested settings use double underscores: SEARCHFEED_HTTP__TIMEOUT=5

    Example:
        SEARCHFEED_SERVICE__ENDPOINT=http://search.example.com/WebSearchService/V1/webSearch
        SEARCHFEED_SERVICE__APPID=my-app
        SEARCHFEED_OBSERVABILITY__LOG_LEVEL=debug
    """

    model_config = {
        "env_prefix": "SEARCHFEED_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="SearchFeed", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    http: HttpSettings = Field(default_factory=HttpSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file override environment variables. Fields the
        file leaves unset are still read from the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
