"""System view XML serialization of store nodes."""

import base64
import typing as t
from datetime import date, datetime
from decimal import Decimal
from xml.sax.handler import ContentHandler
from xml.sax.saxutils import XMLFilterBase, XMLGenerator
from xml.sax.xmlreader import AttributesNSImpl

from ..store.base import Node, Session
from ..util.logging import get_logger

logger = get_logger(__name__)

SV_PREFIX = "sv"
SV_URI = "http://www.jcp.org/jcr/sv/1.0"
XSI_PREFIX = "xsi"

ROOT_NODE_NAME = "jcr:root"
PRIMARY_TYPE_PROPERTY = "jcr:primaryType"


class NamespaceFilter(XMLFilterBase):
    """Passes through only the prefix declarations it was configured with."""

    def __init__(self, *prefixes: str) -> None:
        super().__init__()
        self.prefixes = frozenset(prefixes)

    def startPrefixMapping(self, prefix, uri):
        if prefix in self.prefixes:
            super().startPrefixMapping(prefix, uri)

    def endPrefixMapping(self, prefix):
        if prefix in self.prefixes:
            super().endPrefixMapping(prefix)


def create_content_handler(sink: t.BinaryIO) -> ContentHandler:
    """Build the XML writing chain for a byte sink.

    Events pass a NamespaceFilter keeping only sv/xsi declarations, then an
    XMLGenerator encoding UTF-8 into ``sink``.
    """
    namespace_filter = NamespaceFilter(SV_PREFIX, XSI_PREFIX)
    namespace_filter.setContentHandler(XMLGenerator(sink, encoding="utf-8"))
    return namespace_filter


def property_type(value: t.Any) -> str:
    """Map a Python property value onto its property type name."""
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Long"
    if isinstance(value, float):
        return "Double"
    if isinstance(value, Decimal):
        return "Decimal"
    if isinstance(value, (datetime, date)):
        return "Date"
    if isinstance(value, (bytes, bytearray)):
        return "Binary"
    return "String"


def format_value(value: t.Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


class SystemViewExporter:
    """Walks a node tree and emits system view SAX events."""

    def __init__(
        self,
        session: Session,
        handler: ContentHandler,
        skip_binary: bool = False,
        no_recurse: bool = False,
    ) -> None:
        self.session = session
        self.handler = handler
        self.skip_binary = skip_binary
        self.no_recurse = no_recurse

    def export(self, node: Node) -> None:
        """Serialize ``node`` (and, unless ``no_recurse``, its subtree)."""
        namespaces = {p: u for p, u in self.session.namespaces().items() if p != "xml"}
        namespaces[SV_PREFIX] = SV_URI
        logger.debug(f"Exporting system view of {node.path}")

        self.handler.startDocument()
        for prefix, uri in namespaces.items():
            self.handler.startPrefixMapping(prefix, uri)

        self._export_node(node, recurse=not self.no_recurse)

        for prefix in reversed(list(namespaces)):
            self.handler.endPrefixMapping(prefix)
        self.handler.endDocument()

    def _export_node(self, node: Node, recurse: bool) -> None:
        self._start("node", {"name": node.name or ROOT_NODE_NAME})

        self._export_property(PRIMARY_TYPE_PROPERTY, "Name", [node.primary_type], multiple=False)
        for name, value in node.get_properties().items():
            if name == PRIMARY_TYPE_PROPERTY:
                continue
            multiple = isinstance(value, (list, tuple))
            values = list(value) if multiple else [value]
            type_name = property_type(values[0]) if values else "String"
            if type_name == "Binary" and self.skip_binary:
                values = [b""] * len(values)
            self._export_property(name, type_name, values, multiple)

        if recurse:
            for child in node.get_nodes():
                self._export_node(child, recurse=True)

        self._end("node")

    def _export_property(self, name: str, type_name: str, values: t.List[t.Any], multiple: bool) -> None:
        attributes = {"name": name, "type": type_name}
        if multiple:
            attributes["multiple"] = "true"
        self._start("property", attributes)
        for value in values:
            self._start("value")
            text = format_value(value)
            if text:
                self.handler.characters(text)
            self._end("value")
        self._end("property")

    def _start(self, local_name: str, attributes: t.Optional[t.Dict[str, str]] = None) -> None:
        attributes = attributes or {}
        values = {(SV_URI, key): value for key, value in attributes.items()}
        qnames = {(SV_URI, key): f"{SV_PREFIX}:{key}" for key in attributes}
        self.handler.startElementNS(
            (SV_URI, local_name), f"{SV_PREFIX}:{local_name}", AttributesNSImpl(values, qnames)
        )

    def _end(self, local_name: str) -> None:
        self.handler.endElementNS((SV_URI, local_name), f"{SV_PREFIX}:{local_name}")
