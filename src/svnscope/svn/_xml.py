"""Shared XML helpers for the svn ``--xml`` parsers.

svn documents are parsed into an ElementTree and every repeated element
is read through :func:`normalize_to_list`, so a document holding one
``<entry>`` and one holding many look the same to the parsers.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional, Union

Node = ET.Element
Children = Union[None, Node, Iterable[Node]]


class XmlShapeError(ValueError):
    """The document is not XML or its root is not the expected element."""


def parse_document(xml: str, root_tag: str) -> Node:
    """Parse *xml* and check its root tag. Raises XmlShapeError."""
    try:
        root = ET.fromstring(xml.strip())
    except ET.ParseError as exc:
        raise XmlShapeError(str(exc)) from exc
    if root.tag != root_tag:
        raise XmlShapeError(f"expected <{root_tag}>, got <{root.tag}>")
    return root


def normalize_to_list(children: Children) -> List[Node]:
    """Return *children* as a list whether it is absent, one node, or many."""
    if children is None:
        return []
    if isinstance(children, ET.Element):
        return [children]
    return [c for c in children if c is not None]


def children(node: Optional[Node], tag: str) -> List[Node]:
    if node is None:
        return []
    return normalize_to_list(node.findall(tag))


def child_text(node: Optional[Node], tag: str, default: str = "") -> str:
    if node is None:
        return default
    found = node.find(tag)
    if found is None or found.text is None:
        return default
    return found.text


def to_int(value: Optional[str], default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def attr_int(node: Optional[Node], name: str, default: int = 0) -> int:
    if node is None:
        return default
    return to_int(node.get(name), default)


def optional_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
