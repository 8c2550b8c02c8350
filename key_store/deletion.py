"""
Ordered bulk deletion of stored elements.

Candidates are enumerated by parameter name, so entries whose values no
longer parse are still deletable. Deletes run one at a time and the batch
stops at the first failure; anything already deleted stays deleted.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from loguru import logger

from .elements import parse_element
from .exceptions import ParseSkipped
from .pagination import list_parameters


@dataclass(frozen=True)
class DeletableElement:
    """A stored parameter offered for deletion."""
    name: str
    element: Optional[ET.Element]  # None when the value doesn't parse


# Maps candidates to one order key each; a None key leaves that candidate undeleted.
OrderingHook = Callable[[Sequence[DeletableElement]], Sequence[Optional[int]]]


def list_candidates(client, path: str) -> List[DeletableElement]:
    """All parameters under a path as deletion candidates, in service order."""
    candidates = []
    for entry in list_parameters(client, path):
        parsed = parse_element(entry.name, entry.value)
        element = None if isinstance(parsed, ParseSkipped) else parsed
        candidates.append(DeletableElement(name=entry.name, element=element))
    return candidates


def order_candidates(
    candidates: Sequence[DeletableElement],
    ordering_hook: Optional[OrderingHook] = None,
) -> List[DeletableElement]:
    """
    Apply the caller's deletion order.

    The hook is called once with the full candidate list and returns one key
    per candidate. Candidates are stably sorted by key; a None key keeps
    the candidate out of the batch. Without a hook, natural order is used.

    Raises:
        ValueError: If the hook returns a different number of keys
    """
    if ordering_hook is None:
        return list(candidates)

    keys = list(ordering_hook(tuple(candidates)))
    if len(keys) != len(candidates):
        raise ValueError(
            f"Ordering hook returned {len(keys)} keys for {len(candidates)} candidates"
        )

    selected = [(key, c) for key, c in zip(keys, candidates) if key is not None]
    selected.sort(key=lambda pair: pair[0])
    return [c for _, c in selected]


def delete_all(client, path: str, ordering_hook: Optional[OrderingHook] = None) -> bool:
    """
    Delete the parameters under a path in caller-controlled order.

    Args:
        client: Object exposing list_page(...) and delete_parameter(name)
        path: Normalized parameter path
        ordering_hook: Optional function assigning deletion order keys

    Returns:
        True if every selected candidate was deleted, False at the first
        failed delete (remaining candidates are not attempted)

    Raises:
        ClientError, BotoCoreError: If listing the candidates fails
    """
    ordered = order_candidates(list_candidates(client, path), ordering_hook)
    logger.info(f"Deleting {len(ordered)} parameters under {path}")

    for index, candidate in enumerate(ordered):
        try:
            client.delete_parameter(candidate.name)
        except Exception as e:
            logger.error(
                f"Error deleting parameter {candidate.name} ({index + 1}/{len(ordered)}), "
                f"stopping with {len(ordered) - index} left: {e}"
            )
            return False

    logger.info(f"Deleted {len(ordered)} parameters under {path}")
    return True
