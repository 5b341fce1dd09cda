"""Base adapter interface — Abstract classes for search source connectors."""

from searchfeed.adapters.base.adapter import SearchSource
from searchfeed.adapters.base.service import ServiceVariant

__all__ = ["SearchSource", "ServiceVariant"]
