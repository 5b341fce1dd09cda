"""SearchFeed — XML search-service source adapters for document clustering pipelines."""

__version__ = "0.1.0"
