"""
Parameter Store tier selection.

Standard parameters hold up to 4096 characters and Advanced parameters up to
8192. The selector always picks the smallest tier that fits unless the
configured TierStorageMode forces a higher one, and it runs before any
request is sent so an oversized element never causes a partial write.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from .exceptions import ParameterTooLarge

if TYPE_CHECKING:  # pragma: no cover
    from .config import PersistPolicy


STANDARD_TIER_MAX_SIZE = 4096
ADVANCED_TIER_MAX_SIZE = 8192


class ParameterTier(str, Enum):
    """Storage tiers, valued as the SSM API spells them."""
    STANDARD = "Standard"
    ADVANCED = "Advanced"
    INTELLIGENT_TIERING = "Intelligent-Tiering"


class TierStorageMode(str, Enum):
    """How far up the tier ladder a write may go."""
    STANDARD_ONLY = "StandardOnly"          # default; fail if it won't fit
    ADVANCED_UPGRADEABLE = "AdvancedUpgradeable"
    ADVANCED_ONLY = "AdvancedOnly"
    INTELLIGENT_TIERING = "IntelligentTiering"

    @classmethod
    def parse(cls, value) -> "TierStorageMode":
        """Accept a member, its value ("AdvancedOnly") or its name ("advanced_only")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        key = text.replace("-", "_").replace(" ", "_").lower()
        for mode in cls:
            if key in (mode.name.lower(), mode.value.lower()):
                return mode
        raise ValueError(f"Unknown tier storage mode: {value!r}")


def select_tier(value_length: int, policy: "PersistPolicy") -> ParameterTier:
    """
    Choose the parameter tier for a serialized element.

    Args:
        value_length: Length of the serialized element
        policy: Persist policy whose tier_mode bounds the choice

    Returns:
        Tier to write the parameter with

    Raises:
        ParameterTooLarge: If the value exceeds the advanced tier limit, or the
            standard tier limit while the policy is StandardOnly
    """
    mode = policy.tier_mode
    logger.debug(f"Using tier storage mode {mode.value} to choose a tier for {value_length} characters")

    if value_length > ADVANCED_TIER_MAX_SIZE:
        raise ParameterTooLarge(
            f"Could not save element to SSM parameter. Element has a length of {value_length} "
            f"which exceeds the maximum SSM parameter size of {ADVANCED_TIER_MAX_SIZE}. "
            f"Please consider using another key store.",
            length=value_length,
            limit=ADVANCED_TIER_MAX_SIZE,
            tier_mode=mode,
        )

    if mode is TierStorageMode.ADVANCED_ONLY:
        return ParameterTier.ADVANCED

    if mode is TierStorageMode.INTELLIGENT_TIERING:
        return ParameterTier.INTELLIGENT_TIERING

    if value_length > STANDARD_TIER_MAX_SIZE:
        if mode is TierStorageMode.STANDARD_ONLY:
            raise ParameterTooLarge(
                f"Could not save element to SSM parameter. Element has {value_length} characters "
                f"which exceeds the limit of {STANDARD_TIER_MAX_SIZE} characters of the standard "
                f"parameter tier and usage of the advanced tier is not configured. "
                f"Change tier_mode to {TierStorageMode.ADVANCED_UPGRADEABLE.value} or "
                f"{TierStorageMode.ADVANCED_ONLY.value} to store larger elements.",
                length=value_length,
                limit=STANDARD_TIER_MAX_SIZE,
                tier_mode=mode,
            )
        logger.debug(
            f"Element length {value_length} exceeds the standard tier limit of "
            f"{STANDARD_TIER_MAX_SIZE}, upgrading to the advanced tier"
        )
        return ParameterTier.ADVANCED

    return ParameterTier.STANDARD
