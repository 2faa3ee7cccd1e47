"""Body decoders: JSON with diagnostics, XML to an attributed dict tree, HTML to soup."""

from __future__ import annotations

import json
from typing import Any, Optional

from bs4 import BeautifulSoup
from lxml import etree

from appstore_scraper.errors import ResponseDecodeError

PREVIEW_CHARS = 200
ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"

_XML_PARSER_OPTIONS = {"resolve_entities": False, "no_network": True, "remove_comments": True}


def _preview(body: str) -> str:
    if len(body) > PREVIEW_CHARS:
        return body[:PREVIEW_CHARS] + "..."
    return body


def parse_json(body: str, status: Optional[int] = None) -> Any:
    """Decode ``body`` as JSON, or raise ResponseDecodeError with a short body preview."""
    try:
        return json.loads(body)
    except ValueError as exc:
        status_part = f" (status {status})" if status is not None else ""
        raise ResponseDecodeError(
            f"Invalid JSON response{status_part}: {exc}. Body preview: {_preview(body)}",
            status=status,
        ) from exc


def _element_to_node(element) -> Any:
    children = [child for child in element if isinstance(child.tag, str)]
    text = (element.text or "").strip()

    if not children and not element.attrib:
        return text

    node: dict[str, Any] = {
        f"{ATTRIBUTE_PREFIX}{name}": value for name, value in element.attrib.items()
    }
    for child in children:
        value = _element_to_node(child)
        existing = node.get(child.tag)
        if existing is None:
            node[child.tag] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            node[child.tag] = [existing, value]
    if text:
        node[TEXT_KEY] = text
    return node


def parse_xml(body: str) -> dict[str, Any]:
    """Decode an XML document into nested dicts keyed by tag name.

    Attributes become ``@_<name>`` keys, a tag repeated under one parent
    becomes a list, and a leaf element without attributes becomes its text
    (``""`` when empty). No schema is enforced here.
    """
    # lxml parsers must not be shared between threads.
    parser = etree.XMLParser(**_XML_PARSER_OPTIONS)
    # The XML declaration must be the first thing in the document.
    text = body.lstrip("\ufeff \t\r\n")
    try:
        root = etree.fromstring(text.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise ResponseDecodeError(
            f"Invalid XML response: {exc}. Body preview: {_preview(body)}"
        ) from exc
    return {root.tag: _element_to_node(root)}


def load_html(body: str) -> BeautifulSoup:
    return BeautifulSoup(body, "lxml")
