"""
SSM Parameter Store client with path listing, tiered SecureString writes and deletes.

Supports both AWS and local SSM-compatible endpoints (e.g. LocalStack).
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

USER_AGENT_PRODUCT = "SSMDataProtectionProvider"
SECURE_STRING = "SecureString"


@dataclass
class ParameterEntry:
    """One parameter returned by a path listing."""
    name: str
    value: str


@dataclass
class ParameterPage:
    """One page of a path listing."""
    entries: List[ParameterEntry] = field(default_factory=list)
    next_token: Optional[str] = None


class SsmClient:
    """
    SSM client wrapper used by the key repository.

    Provides:
    - Single-page GetParametersByPath calls with explicit continuation tokens
    - PutParameter with tier, tags and optional KMS key
    - DeleteParameter, when the underlying client supports it
    - Consistent logging of failed calls (errors are re-raised unchanged)
    """

    def __init__(
        self,
        ssm=None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        user_agent_version: Optional[str] = None,
        max_attempts: int = 3,
    ):
        """
        Initialize SSM client.

        Args:
            ssm: Existing boto3 'ssm' client; one is created when None
            region: AWS region
            endpoint_url: SSM endpoint override (e.g., http://localhost:4566)
            user_agent_version: Version appended to the User-Agent as
                SSMDataProtectionProvider/<version>
            max_attempts: botocore retry attempts for created clients
        """
        self.region = region or os.getenv("AWS_REGION")
        self.endpoint_url = endpoint_url or os.getenv("SSM_ENDPOINT")
        self._owns_client = ssm is None

        if ssm is None:
            config_kwargs = {"retries": {"max_attempts": max_attempts, "mode": "standard"}}
            if user_agent_version:
                config_kwargs["user_agent_extra"] = f"{USER_AGENT_PRODUCT}/{user_agent_version}"

            ssm = boto3.client(
                "ssm",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                config=Config(**config_kwargs),
            )
            logger.info(f"SsmClient initialized: region={self.region}, endpoint={self.endpoint_url}")

        self.ssm = ssm

    @property
    def supports_delete(self) -> bool:
        """True when the underlying client exposes DeleteParameter."""
        return callable(getattr(self.ssm, "delete_parameter", None))

    def list_page(
        self,
        path: str,
        with_decryption: bool = True,
        next_token: Optional[str] = None,
    ) -> ParameterPage:
        """
        Fetch one page of parameters directly under a path.

        Args:
            path: Parameter path (e.g., /MyApp/DataProtection/)
            with_decryption: Decrypt SecureString values server-side
            next_token: Continuation token from the previous page

        Returns:
            ParameterPage with entries in service order and the next token, if any

        Raises:
            ClientError, BotoCoreError: If the call fails
        """
        kwargs = {"Path": path, "WithDecryption": with_decryption}
        if next_token:
            kwargs["NextToken"] = next_token

        try:
            response = self.ssm.get_parameters_by_path(**kwargs)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"GetParametersByPath failed for {path}: {e}")
            raise

        entries = [
            ParameterEntry(name=p["Name"], value=p.get("Value", ""))
            for p in response.get("Parameters", [])
        ]
        logger.debug(f"Listed {len(entries)} parameters under {path} (more={bool(response.get('NextToken'))})")
        return ParameterPage(entries=entries, next_token=response.get("NextToken") or None)

    def put_parameter(
        self,
        name: str,
        value: str,
        tier: str,
        parameter_type: str = SECURE_STRING,
        description: Optional[str] = None,
        tags: Optional[Mapping[str, str]] = None,
        kms_key_id: Optional[str] = None,
    ) -> Dict:
        """
        Create a parameter.

        Tags and KMS key are omitted from the request when empty.

        Returns:
            Raw PutParameter response

        Raises:
            ClientError, BotoCoreError: If the call fails
        """
        kwargs = {
            "Name": name,
            "Value": value,
            "Type": parameter_type,
            "Tier": tier,
        }
        if description:
            kwargs["Description"] = description
        if tags:
            kwargs["Tags"] = [{"Key": k, "Value": v} for k, v in tags.items()]
        if kms_key_id:
            kwargs["KeyId"] = kms_key_id

        try:
            response = self.ssm.put_parameter(**kwargs)
            logger.debug(f"Put parameter: {name} (tier={tier}, version={response.get('Version')})")
            return response
        except (ClientError, BotoCoreError) as e:
            logger.error(f"PutParameter failed for {name}: {e}")
            raise

    def delete_parameter(self, name: str) -> None:
        """Delete a parameter by full name."""
        try:
            self.ssm.delete_parameter(Name=name)
            logger.debug(f"Deleted parameter: {name}")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"DeleteParameter failed for {name}: {e}")
            raise

    def close(self) -> None:
        """Close the underlying client if this wrapper created it."""
        if self._owns_client and hasattr(self.ssm, "close"):
            self.ssm.close()


def get_ssm_client(
    user_agent_version: Optional[str] = None,
    region: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> SsmClient:
    """
    Factory function to create an SSM client from environment.

    Reads AWS_REGION, SSM_ENDPOINT and SSM_MAX_ATTEMPTS (default 3); explicit
    region/endpoint_url arguments take precedence.
    """
    return SsmClient(
        region=region or os.getenv("AWS_REGION"),
        endpoint_url=endpoint_url or os.getenv("SSM_ENDPOINT"),
        user_agent_version=user_agent_version,
        max_attempts=int(os.getenv("SSM_MAX_ATTEMPTS", "3")),
    )
