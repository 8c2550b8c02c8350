"""
XML key repository backed by the SSM Parameter Store.

Keys are stored as SecureString parameters named <prefix><name>, one
parameter per element. Encryption happens server-side (optionally with a
configured KMS key); this module never sees ciphertext.
"""

import xml.etree.ElementTree as ET
from typing import List, Optional

from botocore.exceptions import BotoCoreError
from loguru import logger

from . import __version__
from .config import PersistPolicy
from .deletion import OrderingHook, delete_all
from .elements import resolve_element_name, serialize_element
from .exceptions import ConfigurationError, SsmNotConfiguredError
from .pagination import list_elements
from .prefix import normalize_prefix
from .storage.ssm_client import SECURE_STRING, SsmClient, get_ssm_client
from .tiers import select_tier

PARAMETER_DESCRIPTION = "Data protection key"


class ParameterStoreXmlRepository:
    """
    Stores and lists XML key elements under one parameter path.

    Holds only the client handle and immutable configuration; concurrent
    callers are arbitrated by the Parameter Store itself (last write wins
    per parameter name).
    """

    def __init__(
        self,
        client: SsmClient,
        prefix: str,
        policy: Optional[PersistPolicy] = None,
        owns_client: bool = False,
    ):
        """
        Initialize repository.

        Args:
            client: SSM client (or any object with the same list/put methods)
            prefix: Parameter name prefix; '/' is added on both ends as needed
            policy: Persist policy, defaults to StandardOnly with no tags or KMS key
            owns_client: Close the client when the repository is closed

        Raises:
            ConfigurationError: If the client is missing or the prefix is empty
        """
        if client is None:
            raise ConfigurationError("An SSM client is required")

        self.client = client
        self.prefix = normalize_prefix(prefix)
        self.policy = policy or PersistPolicy()
        self._owns_client = owns_client

        logger.info(f"Using SSM Parameter Store to persist keys with parameter name prefix {self.prefix}")

    def get_all_elements(self) -> List[ET.Element]:
        """
        Get all keys stored under the prefix.

        Values that can't be parsed as XML are logged and not returned.
        """
        elements = list_elements(self.client, self.prefix, with_decryption=True)
        logger.info(f"Loaded {len(elements)} keys")
        return elements

    def store_element(self, element: ET.Element, friendly_name: Optional[str] = None) -> str:
        """
        Store a key element as a SecureString parameter.

        Args:
            element: Key element to store
            friendly_name: Parameter name under the prefix; falls back to the
                element's id attribute, then a fresh UUID

        Returns:
            Full parameter name written

        Raises:
            ParameterTooLarge: If the element doesn't fit the allowed tiers
                (raised before any request is sent)
            ClientError, BotoCoreError: If the write fails
        """
        parameter_name = self.prefix + resolve_element_name(element, friendly_name)
        value = serialize_element(element)
        tier = select_tier(len(value), self.policy)
        logger.info(f"Using SSM parameter tier {tier.value} for key {parameter_name}")

        try:
            self.client.put_parameter(
                name=parameter_name,
                value=value,
                tier=tier.value,
                parameter_type=SECURE_STRING,
                description=PARAMETER_DESCRIPTION,
                tags=dict(self.policy.tags) or None,
                kms_key_id=self.policy.kms_key_id or None,
            )
        except Exception as e:
            logger.error(f"Error saving key to SSM Parameter Store with parameter name {parameter_name}: {e}")
            raise

        logger.info(f"Saved key to SSM Parameter Store with parameter name {parameter_name}")
        return parameter_name

    def close(self) -> None:
        if self._owns_client and hasattr(self.client, "close"):
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class DeletableParameterStoreXmlRepository(ParameterStoreXmlRepository):
    """Repository variant for clients that support DeleteParameter."""

    def delete_elements(self, ordering_hook: Optional[OrderingHook] = None) -> bool:
        """
        Delete keys under the prefix, one at a time, in caller-chosen order.

        Args:
            ordering_hook: Receives every candidate once and returns one order
                key per candidate (None leaves it undeleted). Natural order when omitted.

        Returns:
            True if all selected keys were deleted. False as soon as one delete
            fails; later keys are left in place and earlier deletes stand.
        """
        return delete_all(self.client, self.prefix, ordering_hook)


def create_repository(
    prefix: str,
    policy: Optional[PersistPolicy] = None,
    client=None,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> ParameterStoreXmlRepository:
    """
    Build a repository, choosing the deletable variant when the client allows it.

    Args:
        prefix: Parameter name prefix
        policy: Persist policy
        client: SsmClient, a raw boto3 'ssm' client, or None to build one
        region: Region for a client built here
        endpoint_url: Endpoint for a client built here

    Raises:
        ConfigurationError: If the prefix is empty (checked before any client is built)
        SsmNotConfiguredError: If no client is given and one can't be built
    """
    prefix = normalize_prefix(prefix)

    owns_client = False
    if client is None:
        try:
            client = get_ssm_client(user_agent_version=__version__, region=region, endpoint_url=endpoint_url)
        except BotoCoreError as e:
            raise SsmNotConfiguredError(str(e)) from e
        owns_client = True
    elif not isinstance(client, SsmClient) and hasattr(client, "get_parameters_by_path"):
        client = SsmClient(ssm=client)

    supports_delete = getattr(client, "supports_delete", None)
    if supports_delete is None:
        supports_delete = callable(getattr(client, "delete_parameter", None))

    repo_cls = DeletableParameterStoreXmlRepository if supports_delete else ParameterStoreXmlRepository
    return repo_cls(client, prefix, policy=policy, owns_client=owns_client)
