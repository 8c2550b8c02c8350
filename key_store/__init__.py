"""
Persist XML key documents to the AWS SSM Parameter Store.
"""

__version__ = "1.0.0"

from .config import PersistPolicy, RepositoryConfig, load_repository_config, configure_logging
from .deletion import DeletableElement
from .exceptions import (
    ConfigurationError,
    KeyStoreError,
    ParameterTooLarge,
    ParseSkipped,
    SsmNotConfiguredError,
)
from .prefix import normalize_prefix
from .repository import (
    DeletableParameterStoreXmlRepository,
    ParameterStoreXmlRepository,
    create_repository,
)
from .storage import SsmClient, get_ssm_client
from .tiers import ParameterTier, TierStorageMode, select_tier

__all__ = [
    "__version__",
    "PersistPolicy",
    "RepositoryConfig",
    "load_repository_config",
    "configure_logging",
    "DeletableElement",
    "ConfigurationError",
    "KeyStoreError",
    "ParameterTooLarge",
    "ParseSkipped",
    "SsmNotConfiguredError",
    "normalize_prefix",
    "DeletableParameterStoreXmlRepository",
    "ParameterStoreXmlRepository",
    "create_repository",
    "SsmClient",
    "get_ssm_client",
    "ParameterTier",
    "TierStorageMode",
    "select_tier",
]
