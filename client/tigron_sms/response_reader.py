"""
Response reader for Tigron SOAP replies

Tigron answers every procedure with a ``<return>`` wrapper holding
``<item><key>K</key><value>V</value></item>`` children. This module flattens
that into an ordered list of (key, value) pairs. It is deliberately not a
general SOAP deserializer.
"""

import xml.sax
from xml.sax.handler import ContentHandler, feature_external_ges, feature_external_pes
from xml.etree import ElementTree
from typing import List, Optional, Tuple

from .exceptions import ProtocolFailure
from .logging_config import get_logger

logger = get_logger(__name__)

Pair = Tuple[str, str]


def _local_name(name: str) -> str:
    return name.rpartition(':')[2]


class _PairCollector(ContentHandler):
    """SAX handler collecting key/value pairs in document order"""

    def __init__(self):
        super().__init__()
        self.pairs: List[Pair] = []
        # Tracked but not used to gate emission: stray key/value elements
        # outside <return> are collected as well.
        self.inside_wrapper = False
        self.reading_key = False
        self.reading_value = False
        self.current_key = ""
        self._text: List[str] = []

    def _flush_text(self):
        # SAX may split character data; handle it as one run per element boundary
        text = ''.join(self._text)
        self._text = []
        if not text or text.isspace():
            return

        if self.reading_key:
            self.current_key = text
        if self.reading_value:
            self.pairs.append((self.current_key, text))

    def startElement(self, name, attrs):
        self._flush_text()
        self.reading_key = False
        self.reading_value = False

        local = _local_name(name)
        if local == 'key':
            self.reading_key = True
        elif local == 'value':
            self.reading_value = True
        elif local == 'return':
            self.inside_wrapper = True

    def endElement(self, name):
        self._flush_text()
        if _local_name(name) == 'return':
            self.inside_wrapper = False

    def characters(self, content):
        self._text.append(content)


def parse(body: str) -> List[Pair]:
    """
    Extract the (key, value) pairs from a response body.

    Never raises on malformed XML: parsing stops at the first tokenizer
    error and the pairs collected up to that point are returned.

    Args:
        body: Response body as text

    Returns:
        List of (key, value) tuples in document order
    """
    handler = _PairCollector()
    parser = xml.sax.make_parser()
    parser.setFeature(feature_external_ges, False)
    parser.setFeature(feature_external_pes, False)
    parser.setContentHandler(handler)

    try:
        parser.feed(body.encode('utf-8', 'replace'))
        parser.close()
    except xml.sax.SAXException as e:
        logger.debug(f"Stopped reading response after {len(handler.pairs)} pairs: {e}")

    return handler.pairs


def value(pairs: List[Pair], key: str) -> str:
    """
    Returns the value of the first pair matching key, or "" if none matches.
    """
    for pair_key, pair_value in pairs:
        if pair_key == key:
            return pair_value
    return ""


def find_fault(body: str) -> Optional[str]:
    """
    Check that a response is a well-formed XML document and look for a SOAP fault.

    Args:
        body: Response body as text

    Returns:
        The fault text if the response carries a SOAP Fault, otherwise None

    Raises:
        ProtocolFailure: if the body is not well-formed XML
    """
    try:
        root = ElementTree.fromstring(body.encode('utf-8', 'replace'))
    except ElementTree.ParseError as e:
        raise ProtocolFailure(f"Response is not well-formed XML: {e}") from e

    for element in root.iter():
        if element.tag.rpartition('}')[2] != 'Fault':
            continue

        # SOAP 1.1 uses faultstring, SOAP 1.2 uses Reason/Text
        for child in element.iter():
            if child.tag.rpartition('}')[2] in ('faultstring', 'Text') and child.text:
                return child.text.strip()
        return "SOAP fault"

    return None
