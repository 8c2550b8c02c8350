"""
Configuration for the Parameter Store key repository.

The repository itself only takes explicit constructor arguments. Hosts that
want file/env driven wiring use load_repository_config(), which layers:

1. a local .env (python-dotenv)
2. an optional YAML file with keys: prefix, kms_key_id, tier_mode, tags,
   region, endpoint_url
3. environment overrides:
   - KEY_STORE_PREFIX
   - KEY_STORE_KMS_KEY_ID
   - KEY_STORE_TIER_MODE (StandardOnly|AdvancedUpgradeable|AdvancedOnly|IntelligentTiering)
   - KEY_STORE_TAGS (k=v,k2=v2)
   - AWS_REGION, SSM_ENDPOINT

SSM_MAX_ATTEMPTS (botocore retry attempts, default 3) is read when the
client is built, by storage.get_ssm_client().
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv
from loguru import logger

from .exceptions import ConfigurationError
from .prefix import normalize_prefix
from .tiers import TierStorageMode


@dataclass(frozen=True)
class PersistPolicy:
    """
    How elements are written to the Parameter Store.

    Attributes:
        kms_key_id: KMS key used to encrypt SecureString values; the account's
            default key is used when None
        tier_mode: Highest tier that may be used. The lowest fitting tier is
            still chosen unless the mode forces a higher one.
        tags: Tags attached to every parameter created
    """
    kms_key_id: Optional[str] = None
    tier_mode: TierStorageMode = TierStorageMode.STANDARD_ONLY
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        try:
            mode = TierStorageMode.parse(self.tier_mode)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        object.__setattr__(self, "tier_mode", mode)
        # Snapshot so later mutation of the caller's dict can't leak in
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags or {})))

    def __hash__(self):
        return hash((self.kms_key_id, self.tier_mode, tuple(sorted(self.tags.items()))))


@dataclass(frozen=True)
class RepositoryConfig:
    """Resolved settings for building a repository and its SSM client."""
    prefix: str
    policy: PersistPolicy
    region: Optional[str] = None
    endpoint_url: Optional[str] = None


def parse_tags(raw: Union[str, Mapping[str, str], None]) -> Dict[str, str]:
    """
    Parse tags from a mapping or a "k=v,k2=v2" string.

    Raises:
        ConfigurationError: On an entry without '=' or with an empty key
    """
    if not raw:
        return {}
    if isinstance(raw, Mapping):
        return {str(k): str(v) for k, v in raw.items()}

    tags: Dict[str, str] = {}
    for part in str(raw).split(","):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Malformed tag entry {part!r}, expected key=value")
        tags[key.strip()] = value.strip()
    return tags


def _load_yaml(config_path: Path) -> dict:
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return raw


def load_repository_config(config_path: Optional[Union[str, Path]] = None) -> RepositoryConfig:
    """
    Load repository configuration from .env, an optional YAML file and the environment.

    Args:
        config_path: YAML file path; KEY_STORE_CONFIG is used when None

    Returns:
        RepositoryConfig with a normalized prefix

    Raises:
        ConfigurationError: If the prefix is missing or any value is invalid
    """
    load_dotenv()

    config_path = config_path or os.getenv("KEY_STORE_CONFIG")
    raw: dict = {}
    if config_path:
        path = Path(config_path)
        if path.exists():
            raw = _load_yaml(path)
            logger.debug(f"Loaded key store config from {path}")
        else:
            logger.warning(f"Config file not found: {path}, using environment only")

    prefix = os.getenv("KEY_STORE_PREFIX") or raw.get("prefix")
    if not prefix:
        raise ConfigurationError("KEY_STORE_PREFIX (or 'prefix' in the config file) is required")

    tags = parse_tags(raw.get("tags"))
    tags.update(parse_tags(os.getenv("KEY_STORE_TAGS")))

    policy = PersistPolicy(
        kms_key_id=os.getenv("KEY_STORE_KMS_KEY_ID") or raw.get("kms_key_id") or None,
        tier_mode=os.getenv("KEY_STORE_TIER_MODE") or raw.get("tier_mode") or TierStorageMode.STANDARD_ONLY,
        tags=tags,
    )

    return RepositoryConfig(
        prefix=normalize_prefix(prefix),
        policy=policy,
        region=os.getenv("AWS_REGION") or raw.get("region"),
        endpoint_url=os.getenv("SSM_ENDPOINT") or raw.get("endpoint_url"),
    )


def configure_logging(log_file: Union[str, Path], level: str = "INFO") -> int:
    """Add a loguru file sink for key store logs (rotated at 10 MB, 5 files kept)."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logger.add(log_path, level=level.upper(), rotation="10 MB", retention=5, filter="key_store")
