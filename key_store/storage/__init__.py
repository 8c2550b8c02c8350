"""
Remote storage layer for the Parameter Store.
"""

from .ssm_client import SsmClient, ParameterEntry, ParameterPage, get_ssm_client

__all__ = ["SsmClient", "ParameterEntry", "ParameterPage", "get_ssm_client"]
