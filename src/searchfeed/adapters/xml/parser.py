"""Streaming XML response parser.

``XMLResponseParser`` is an lxml parser *target*: lxml calls ``start``,
``data`` and ``end`` as it consumes the byte stream, and the target builds
the ``SearchEngineResponse`` incrementally. Nothing but the current record
and the element stack is kept in memory.

Element names are compared by local name, so the default namespace most
services declare (e.g. ``urn:yahoo:srch``) needs no configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from lxml import etree

from searchfeed.adapters.base.exceptions import ParseError, TransportError
from searchfeed.adapters.base.service import ResponseSchema
from searchfeed.adapters.xml.decoder import STREAM_ERRORS, is_stream_failure
from searchfeed.models.document import Record
from searchfeed.models.response import ERROR_KEY, FIRST_INDEX_KEY, RESULTS_RETURNED_KEY, SearchEngineResponse

logger = logging.getLogger(__name__)


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.debug("Ignoring non-numeric attribute value: %r", value)
        return None


class XMLResponseParser:
    """lxml parser target accumulating records and paging metadata.

    Args:
        schema: Element and attribute names of the service's response.
    """

    def __init__(self, schema: ResponseSchema) -> None:
        self.schema = schema
        self.response = SearchEngineResponse()
        self._depth = 0
        self._declared_total: int | None = None
        self._declared_returned: int | None = None

        # Current result: its depth, and for each open element below it the
        # name, the text of its whole subtree, whether it holds text of its
        # own and whether it has child elements.
        self._record: dict[str, str] | None = None
        self._record_depth = 0
        self._path: list[str] = []
        self._texts: list[list[str]] = []
        self._own_text: list[bool] = []
        self._has_children: list[bool] = []

        self._error_depth: int | None = None
        self._text: list[str] = []

    # ── Target interface ─────────────────────────────────────────────────

    def start(self, tag: str, attrib: dict[str, str]) -> None:
        self._depth += 1
        name = _local_name(tag)
        self._text = []

        if self._record is not None:
            if self._has_children:
                self._has_children[-1] = True
            self._path.append(name)
            self._texts.append([])
            self._own_text.append(False)
            self._has_children.append(False)
        elif name == self.schema.result:
            self._record = {}
            self._record_depth = self._depth
        elif name == self.schema.result_set:
            self._on_result_set(attrib)
        elif name == self.schema.error and self._error_depth is None:
            self._error_depth = self._depth

    def data(self, text: str) -> None:
        if self._texts:
            for buffer in self._texts:
                buffer.append(text)
            if text.strip():
                self._own_text[-1] = True
        else:
            self._text.append(text)

    def end(self, tag: str) -> None:
        name = _local_name(tag)

        if self._record is not None:
            if self._depth == self._record_depth:
                self.response.results.append(Record(fields=self._record))
                self._record = None
            else:
                self._end_field(self._record)
        elif self._error_depth is not None:
            if name == self.schema.error_message:
                self.response.metadata[ERROR_KEY] = "".join(self._text).strip()
            if self._depth == self._error_depth:
                self._error_depth = None

        self._text = []
        self._depth -= 1

    def close(self) -> SearchEngineResponse:
        returned = len(self.response.results)
        if self._declared_returned is not None and self._declared_returned != returned:
            logger.debug(
                "Declared results returned (%d) differs from parsed results (%d)",
                self._declared_returned,
                returned,
            )
        self.response.metadata[RESULTS_RETURNED_KEY] = str(returned)
        self.response.results_total = self._declared_total if self._declared_total is not None else returned
        return self.response

    # ── Helpers ──────────────────────────────────────────────────────────

    def _end_field(self, record: dict[str, str]) -> None:
        path = ".".join(self._path)
        text = "".join(self._texts.pop()).strip()
        own_text = self._own_text.pop()
        has_children = self._has_children.pop()
        self._path.pop()

        if not has_children:
            record[self.schema.field_name(path)] = text
        elif own_text:
            # Mixed content (e.g. highlight markup): the field is the text of
            # the whole subtree, replacing the leaves recorded below it.
            prefix = path + "."
            for key in [k for k in record if k.startswith(prefix)]:
                del record[key]
            record[self.schema.field_name(path)] = text

    def _on_result_set(self, attrib: Any) -> None:
        self._declared_total = _parse_int(attrib.get(self.schema.total_attribute))
        self._declared_returned = _parse_int(attrib.get(self.schema.returned_attribute))
        first_index = _parse_int(attrib.get(self.schema.first_index_attribute))
        if first_index is not None:
            self.response.metadata[FIRST_INDEX_KEY] = str(first_index)


def _create_parser(target: XMLResponseParser) -> etree.XMLParser:
    try:
        return etree.XMLParser(
            target=target,
            resolve_entities=False,
            load_dtd=False,
            no_network=True,
        )
    except (etree.LxmlError, ValueError, TypeError) as e:
        raise ParseError("Could not acquire XML parser.", kind=ParseError.PARSER_UNAVAILABLE) from e


def parse_response_xml(chunks: Iterable[bytes], schema: ResponseSchema) -> SearchEngineResponse:
    """Parse an XML response body fed chunk by chunk.

    Args:
        chunks: The (already decompressed) body.
        schema: Element and attribute names of the service's response.

    Returns:
        The parsed response with ``resultsReturned`` (and ``firstIndex`` when
        declared) in its metadata.

    Raises:
        TransportError: If reading the body failed part-way.
        ParseError: If the body is not well-formed XML, or no parser is available.
    """
    parser = _create_parser(XMLResponseParser(schema))
    try:
        for chunk in chunks:
            parser.feed(chunk)
        response: SearchEngineResponse = parser.close()
        return response
    except etree.XMLSyntaxError as e:
        if is_stream_failure(e):
            raise TransportError(f"Reading the response failed: {e}") from e
        raise ParseError(f"XML parsing exception: {e}") from e
    except STREAM_ERRORS as e:
        raise TransportError(f"Reading the response failed: {e}") from e
