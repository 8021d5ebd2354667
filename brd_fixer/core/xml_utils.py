from __future__ import annotations

"""lxml helpers for loading, editing and serialising board documents.

The core never touches files: these helpers work on text and trees only.
"""

import logging
from typing import List, Union

from lxml import etree as ET

from brd_fixer.core.exceptions import MalformedDocument

__all__ = [
    "decode_board",
    "parse_board",
    "serialize_board",
    "ensure_xml_declaration",
    "find_all",
    "detach",
    "remove_attribute",
]

logger = logging.getLogger(__name__)


def _make_parser() -> ET.XMLParser:
    # Keep whitespace, comments and CDATA so untouched regions serialise as read.
    return ET.XMLParser(
        remove_blank_text=False,
        remove_comments=False,
        strip_cdata=False,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
        # Text always reaches lxml as UTF-8 bytes, whatever the declaration says.
        encoding="utf-8",
    )


def decode_board(content: Union[str, bytes]) -> str:
    """Return board text, decoding UTF-8 bytes (a leading BOM is dropped)."""
    if isinstance(content, str):
        return content
    try:
        return bytes(content).decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedDocument(f"BRD file is not valid UTF-8: {exc}", cause=exc) from exc


def parse_board(content: Union[str, bytes]) -> ET._ElementTree:
    """Parse *content* into an lxml element tree.

    Text input is encoded as UTF-8 first and always read back as UTF-8, so a
    stale ``encoding=`` in the document's own declaration is ignored.

    Raises
    ------
    MalformedDocument
        If the content is empty, undecodable or not well-formed XML.
    """
    if isinstance(content, str):
        data = content.encode("utf-8")
    else:
        data = bytes(content)

    if not data.strip():
        raise MalformedDocument("Invalid XML in BRD file: document is empty")

    try:
        root = ET.fromstring(data, _make_parser())
    except ET.XMLSyntaxError as exc:
        raise MalformedDocument(f"Invalid XML in BRD file: {exc}", cause=exc) from exc
    except ValueError as exc:
        raise MalformedDocument(f"Invalid XML in BRD file: {exc}", cause=exc) from exc

    logger.debug("Parsed board with root <%s>", root.tag)
    return root.getroottree()


def serialize_board(tree: ET._ElementTree) -> str:
    """Render the whole document (DOCTYPE and top-level comments included)."""
    return ET.tostring(tree, encoding="unicode")


def ensure_xml_declaration(text: str, declaration: str) -> str:
    """Prefix *text* with *declaration* unless it already starts with one."""
    if text.startswith("<?xml "):
        return text
    return f"{declaration}\n{text}"


def find_all(node: Union[ET._Element, ET._ElementTree], path: str) -> List[ET._Element]:
    """Return elements matching *path* below *node* in document order.

    A bare tag name searches every depth; anything else is treated as an
    ElementPath expression relative to *node*.
    """
    if isinstance(node, ET._ElementTree):
        node = node.getroot()
    if "/" not in path:
        return [el for el in node.iter(path)]
    return list(node.iterfind(path))


def detach(element: ET._Element) -> None:
    """Remove *element* from its parent, leaving its trailing text behind.

    lxml moves ``tail`` text together with the element; the surrounding
    whitespace belongs to the neighbours, so it is re-attached to the
    previous sibling (or the parent's leading text).
    """
    parent = element.getparent()
    if parent is None:
        return
    tail = element.tail
    if tail:
        previous = element.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + tail
        else:
            parent.text = (parent.text or "") + tail
    parent.remove(element)


def remove_attribute(element: ET._Element, name: str) -> bool:
    """Delete attribute *name*; return True if it was present."""
    if name not in element.attrib:
        return False
    del element.attrib[name]
    return True
