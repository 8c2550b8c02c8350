"""
Error types raised by the key store.

Remote failures are not wrapped: botocore's ClientError / BotoCoreError
reach the caller unchanged after being logged.
"""

from dataclasses import dataclass
from typing import Optional


class KeyStoreError(Exception):
    """Base class for key store errors."""


class ConfigurationError(KeyStoreError, ValueError):
    """Missing or invalid configuration, raised before any network access."""


class SsmNotConfiguredError(ConfigurationError):
    """No Systems Manager client was supplied and none could be built."""

    def __init__(self, reason: Optional[str] = None):
        message = (
            "The AWS Systems Manager client is not configured. Pass an SsmClient "
            "(or a boto3 'ssm' client) when creating the repository, or set "
            "AWS_REGION so one can be built from the environment."
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ParameterTooLarge(KeyStoreError):
    """A serialized element does not fit the largest tier the policy allows."""

    def __init__(self, message: str, length: int, limit: int, tier_mode):
        super().__init__(message)
        self.length = length
        self.limit = limit
        self.tier_mode = tier_mode


@dataclass(frozen=True)
class ParseSkipped:
    """A listed parameter whose value could not be parsed as XML."""
    name: str
    reason: str
