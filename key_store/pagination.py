"""
Full-subtree listing over GetParametersByPath pages.

Pages are fetched one after another until the service stops returning a
continuation token. A failed page request aborts the whole listing; a value
that fails to parse only drops that one entry.
"""

import xml.etree.ElementTree as ET
from typing import Iterator, List, Union

from loguru import logger

from .elements import parse_element
from .exceptions import ParseSkipped
from .storage.ssm_client import ParameterEntry, ParameterPage


def iter_pages(client, path: str, with_decryption: bool = True) -> Iterator[ParameterPage]:
    """
    Yield every page under a path, following continuation tokens.

    There is no client-side page cap; a service that keeps returning
    tokens keeps this iterator going.
    """
    next_token = None
    page_number = 0
    while True:
        try:
            page = client.list_page(path, with_decryption=with_decryption, next_token=next_token)
        except Exception as e:
            logger.error(f"Error listing parameters starting with {path} (page {page_number + 1}): {e}")
            raise
        page_number += 1
        yield page
        next_token = page.next_token
        if not next_token:
            break


def list_parameters(client, path: str, with_decryption: bool = True) -> List[ParameterEntry]:
    """Every parameter under a path, in service order, parseable or not."""
    entries: List[ParameterEntry] = []
    for page in iter_pages(client, path, with_decryption=with_decryption):
        entries.extend(page.entries)
    return entries


def parse_entries(entries: List[ParameterEntry]) -> List[Union[ET.Element, ParseSkipped]]:
    """Parse each entry's value, keeping a ParseSkipped in place of failures."""
    return [parse_element(entry.name, entry.value) for entry in entries]


def list_elements(client, path: str, with_decryption: bool = True) -> List[ET.Element]:
    """
    Every parseable element stored under a path.

    Args:
        client: Object exposing list_page(path, with_decryption, next_token)
        path: Normalized parameter path
        with_decryption: Decrypt SecureString values server-side

    Returns:
        Parsed elements in page-return order; unparseable values are logged
        and left out
    """
    elements: List[ET.Element] = []
    for result in parse_entries(list_parameters(client, path, with_decryption=with_decryption)):
        if isinstance(result, ParseSkipped):
            logger.warning(f"Error parsing key {result.name}, key will be skipped: {result.reason}")
            continue
        elements.append(result)
    return elements
