"""Search source layer — Pluggable connectors for remote search services.

Built-in adapters:
  - xml: HTTP GET services answering with (optionally gzip-compressed) XML

Implement ``ServiceVariant`` to describe a new service for the xml adapter,
or ``SearchSource`` to connect an entirely different kind of backend.
"""
