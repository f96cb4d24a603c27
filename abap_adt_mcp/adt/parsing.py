"""XML helpers for ADT request and response bodies."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from lxml import etree

logger = logging.getLogger(__name__)

ADTCORE_NS = "http://www.sap.com/adt/core"

# ADT responses never need DTDs or external entities
_PARSER = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_blank_text=True,
)


def parse_xml(text: str) -> etree._Element:
    """Parse an ADT response body; raises etree.XMLSyntaxError on bad input."""
    return etree.fromstring(text.encode("utf-8"), parser=_PARSER)


def local_name(tag: Any) -> str:
    return etree.QName(tag).localname


def local_attributes(element: etree._Element) -> Dict[str, str]:
    """Element attributes keyed by local name (namespace prefixes dropped)."""
    return {local_name(key): value for key, value in element.attrib.items()}


def _iter_local(root: etree._Element, name: str):
    for element in root.iter():
        if isinstance(element.tag, str) and local_name(element.tag) == name:
            yield element


def parse_exception(text: str) -> Optional[Tuple[str, str]]:
    """
    Extract (type, message) from an ``exc:exception`` body.

    Returns None when the body is not an ADT exception document.
    """
    if not text or not text.lstrip().startswith("<"):
        return None
    try:
        root = parse_xml(text)
    except etree.XMLSyntaxError as e:
        logger.debug(f"Error body is not well-formed XML: {e}")
        return None
    if local_name(root.tag) != "exception":
        return None

    type_element = root.find("{*}type")
    error_type = type_element.get("id", "") if type_element is not None else ""

    message = ""
    for name in ("localizedMessage", "message"):
        found = next(_iter_local(root, name), None)
        if found is not None and found.text:
            message = found.text.strip()
            break
    return error_type, message


def parse_lock_result(text: str) -> Dict[str, str]:
    """Flatten the ``asx:abap`` lock result DATA block into a dict."""
    root = parse_xml(text)
    data = next(_iter_local(root, "DATA"), None)
    if data is None:
        return {}
    return {
        local_name(child.tag): child.text or ""
        for child in data
        if isinstance(child.tag, str)
    }


def parse_object_references(text: str) -> List[Dict[str, str]]:
    """Search results: one dict per ``adtcore:objectReference``."""
    root = parse_xml(text)
    return [local_attributes(ref) for ref in _iter_local(root, "objectReference")]


def parse_node_path(text: str) -> List[Dict[str, str]]:
    """Repository tree path: one dict per ``objectLinkReference``."""
    root = parse_xml(text)
    return [local_attributes(ref) for ref in _iter_local(root, "objectLinkReference")]


def parse_activation_result(text: str) -> Dict[str, Any]:
    """
    Activation response.

    An empty body means success without messages. Otherwise the body holds
    ``chkl:messages`` (one ``msg`` per finding) and, for objects left
    inactive, ``ioc:inactiveObjects``.
    """
    if not text or not text.strip():
        return {"success": True, "messages": [], "inactive": []}

    root = parse_xml(text)
    messages = []
    for msg in _iter_local(root, "msg"):
        entry = local_attributes(msg)
        short_text = next(_iter_local(msg, "txt"), None)
        if short_text is not None and short_text.text:
            entry["shortText"] = short_text.text.strip()
        messages.append(entry)

    inactive = _inactive_entries(root)
    success = not inactive and not any(m.get("type") in ("E", "A", "X") for m in messages)
    return {"success": success, "messages": messages, "inactive": inactive}


def parse_inactive_objects(text: str) -> List[Dict[str, str]]:
    if not text or not text.strip():
        return []
    return _inactive_entries(parse_xml(text))


def _inactive_entries(root: etree._Element) -> List[Dict[str, str]]:
    entries = []
    for entry in _iter_local(root, "entry"):
        obj = entry.find("{*}object")
        if obj is None:
            continue
        ref = obj.find("{*}ref")
        item = local_attributes(ref) if ref is not None else {}
        for key, value in local_attributes(obj).items():
            item.setdefault(key, value)
        entries.append(item)
    return entries


def build_object_references(references: List[Dict[str, str]]) -> bytes:
    """Request body listing objects for activation."""
    nsmap = {"adtcore": ADTCORE_NS}
    root = etree.Element(f"{{{ADTCORE_NS}}}objectReferences", nsmap=nsmap)
    for reference in references:
        element = etree.SubElement(root, f"{{{ADTCORE_NS}}}objectReference")
        for key, value in reference.items():
            element.set(f"{{{ADTCORE_NS}}}{key}", value)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")
