"""XML text to generic nested tree conversion.

The tree is made of three shapes:
- ``str`` for leaf text (``""`` for empty elements)
- ``dict`` for elements with children or attributes
- ``list`` when an element repeats under the same parent

A single occurrence is never wrapped in a list, so consumers must normalize
repeatable elements with ``as_list`` before iterating.
"""

import re
from typing import Any, Dict
from xml.etree.ElementTree import Element

from defusedxml import ElementTree as SafeET
from defusedxml import DefusedXmlException

from credit_report_gateway.domain.exceptions import ReportParsingError
from credit_report_gateway.domain.models import Node

ATTRIBUTES_KEY = "$"
TEXT_KEY = "_"

_WHITESPACE = re.compile(r"\s+")


def _local_name(tag: str) -> str:
    # "{urn:ns}Tag" -> "Tag"
    return tag.rsplit("}", 1)[-1]


def _clean_text(text: str | None) -> str:
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def element_to_node(element: Element) -> Node:
    """Convert one element (and its subtree) into a tree node"""
    children = list(element)
    text = _clean_text(element.text)

    if not children and not element.attrib:
        return text

    node: Dict[str, Any] = {}
    if element.attrib:
        node[ATTRIBUTES_KEY] = {_local_name(k): v for k, v in element.attrib.items()}

    for child in children:
        tag = _local_name(child.tag)
        value = element_to_node(child)
        if tag not in node:
            node[tag] = value
        elif isinstance(node[tag], list):
            node[tag].append(value)
        else:
            node[tag] = [node[tag], value]

    if text:
        node[TEXT_KEY] = text

    return node


def parse_xml(xml_content: str) -> Dict[str, Node]:
    """
    Parse XML text into ``{root_tag: node}``.

    Raises:
        ReportParsingError: On malformed XML or forbidden constructs (entities, DTDs)
    """
    try:
        root = SafeET.fromstring(xml_content.lstrip("\ufeff").strip())
    except SafeET.ParseError as e:
        raise ReportParsingError(f"Failed to parse XML: {e}") from e
    except DefusedXmlException as e:
        raise ReportParsingError(f"Failed to parse XML: forbidden construct ({e})") from e

    return {_local_name(root.tag): element_to_node(root)}
