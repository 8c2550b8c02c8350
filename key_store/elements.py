"""
XML element helpers.

Elements are xml.etree.ElementTree.Element instances. A stored parameter's
value is the element serialized as unicode text with no XML declaration.
"""

import copy
import uuid
import xml.etree.ElementTree as ET
from typing import Optional, Union

from .exceptions import ParseSkipped


def serialize_element(element: ET.Element) -> str:
    """
    Serialize an element to the text stored as the parameter value.

    Only the element itself is written; tail text left over from an
    enclosing document is dropped.
    """
    own = copy.copy(element)
    own.tail = None
    return ET.tostring(own, encoding="unicode")


def parse_element(name: str, value: Optional[str]) -> Union[ET.Element, ParseSkipped]:
    """
    Parse a parameter value as XML.

    Returns the element, or a ParseSkipped describing why it was rejected.
    """
    if not value or not value.strip():
        return ParseSkipped(name=name, reason="empty value")
    try:
        return ET.fromstring(value)
    except ET.ParseError as e:
        return ParseSkipped(name=name, reason=str(e))


def resolve_element_name(element: ET.Element, friendly_name: Optional[str] = None) -> str:
    """
    Pick the parameter name for an element.

    Order: friendly_name, the element's "id" attribute, then a fresh UUID.
    """
    return friendly_name or element.get("id") or str(uuid.uuid4())
