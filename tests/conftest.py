"""Pytest configuration and shared fixtures for hclient tests."""

import pytest

from hclient import HClient
from hclient.testing import FakePlatform, make_config


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear hclient-related environment variables before each test.

    This prevents a developer's real settings leaking into config tests.
    """
    import os

    test_prefixes = ("TEST_", "HCLIENT_", "CRM_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def platform():
    """A fake tenant with a `lead` object (name required) and two owners."""
    fake = FakePlatform()
    fake.add_object(
        "lead",
        fields=[
            {"name": "name", "label": "Name", "type": "text", "required": True},
            {"name": "status", "label": "Status", "type": "option"},
            {"name": "amount", "label": "Amount", "type": "number"},
        ],
        label="Lead",
    )
    fake.add_owner("u-alice")
    fake.add_owner("u-bob")
    return fake


@pytest.fixture
def config(platform):
    return make_config(platform)


@pytest.fixture
async def client(platform, config):
    async with HClient(config, transport=platform.transport()) as hclient:
        yield hclient
