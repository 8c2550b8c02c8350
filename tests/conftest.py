from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Optional

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

import pytest
from botocore.exceptions import ClientError
from loguru import logger

from key_store.storage.ssm_client import ParameterEntry, ParameterPage


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} (test)"}}, operation)


class FakeSsm:
    """
    In-memory stand-in for SsmClient.

    Parameters live in an insertion-ordered dict; listing returns them in
    pages of page_size. Names in fail_deletes raise on delete.
    """

    def __init__(self, page_size: int = 10):
        self.page_size = page_size
        self.parameters: Dict[str, str] = {}
        self.puts: List[dict] = []
        self.list_calls: List[dict] = []
        self.delete_calls: List[str] = []
        self.fail_deletes: set = set()
        self.fail_list_on_call: Optional[int] = None
        self.fail_put: Optional[Exception] = None

    def seed(self, path: str, values: Dict[str, str]) -> None:
        for name, value in values.items():
            self.parameters[path + name] = value

    def list_page(self, path, with_decryption=True, next_token=None):
        self.list_calls.append({"path": path, "with_decryption": with_decryption, "next_token": next_token})
        if self.fail_list_on_call is not None and len(self.list_calls) == self.fail_list_on_call:
            raise client_error("ThrottlingException", "GetParametersByPath")

        names = [n for n in self.parameters if n.startswith(path)]
        start = int(next_token) if next_token else 0
        chunk = names[start:start + self.page_size]
        more = start + self.page_size < len(names)
        return ParameterPage(
            entries=[ParameterEntry(name=n, value=self.parameters[n]) for n in chunk],
            next_token=str(start + self.page_size) if more else None,
        )

    def put_parameter(self, name, value, tier, parameter_type="SecureString",
                      description=None, tags=None, kms_key_id=None):
        self.puts.append({
            "name": name,
            "value": value,
            "tier": tier,
            "parameter_type": parameter_type,
            "description": description,
            "tags": tags,
            "kms_key_id": kms_key_id,
        })
        if self.fail_put is not None:
            raise self.fail_put
        self.parameters[name] = value
        return {"Version": 1, "Tier": tier}

    def delete_parameter(self, name):
        self.delete_calls.append(name)
        if name in self.fail_deletes:
            raise client_error("ParameterNotFound", "DeleteParameter")
        del self.parameters[name]


class ScriptedPages:
    """Client returning a fixed list of pages, one per list_page call."""

    def __init__(self, pages: List[ParameterPage]):
        self.pages = list(pages)
        self.calls: List[dict] = []

    def list_page(self, path, with_decryption=True, next_token=None):
        self.calls.append({"path": path, "with_decryption": with_decryption, "next_token": next_token})
        if not self.pages:
            raise AssertionError("Exhausted pages")
        return self.pages.pop(0)


@pytest.fixture()
def fake_ssm() -> FakeSsm:
    return FakeSsm()


@pytest.fixture()
def log_messages():
    """Capture loguru output for the duration of a test."""
    messages: List[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture()
def scripted_pages():
    return ScriptedPages


@pytest.fixture()
def make_client_error():
    return client_error
