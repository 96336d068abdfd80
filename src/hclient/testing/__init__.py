"""Testing utilities for code built on hclient.

Example:
    ```python
    from hclient import HClient
    from hclient.testing import FakePlatform, make_config


    async def test_lists_leads():
        platform = FakePlatform()
        platform.add_object("lead", [{"name": "name", "required": True}])

        async with HClient(make_config(platform), transport=platform.transport()) as client:
            code = await client.create_data("lead", {"name": "ACME"})
            assert (await client.get_data("lead", code))["name"] == "ACME"
    ```
"""

from hclient.config import Config
from hclient.testing.platform import FakePlatform


def make_config(platform: FakePlatform, **overrides) -> Config:
    """A Config whose identity matches `platform`."""
    values = {
        "base_url": f"https://crm.test{platform.prefix}",
        "client_id": platform.client_id,
        "client_secret": platform.client_secret,
        "account": platform.account,
    }
    values.update(overrides)
    return Config(**values)


__all__ = ["FakePlatform", "make_config"]
