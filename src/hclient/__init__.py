"""hclient - async client for a low-code CRM platform's business data API.

Provides:
- Business object schema listing and description
- Record create/read/update/delete, batch writes and ownership transfer
- Exact-match queries, auxiliary object queries and raw SQL queries
- A shared access token refreshed single-flight, with one transparent
  retry when the platform rejects it

Example:
    ```python
    from hclient import Config, HClient, QueryOptions

    config = Config.from_env()

    async with HClient(config) as client:
        page = await client.query_data("lead", QueryOptions(query={"status": "open"}))
        for record in page.records:
            print(record["code"], record.get("name"))
    ```
"""

from hclient.client import HClient
from hclient.config import Config
from hclient.errors import (
    AuthError,
    HClientError,
    NetworkError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from hclient.models import BizRecord, FieldMeta, ObjectMeta, ObjectMetaDetail, QueryOptions, QueryResult

__version__ = "0.1.0"

__all__ = [
    "AuthError",
    "BizRecord",
    "Config",
    "FieldMeta",
    "HClient",
    "HClientError",
    "NetworkError",
    "NotFoundError",
    "ObjectMeta",
    "ObjectMetaDetail",
    "QueryOptions",
    "QueryResult",
    "UpstreamError",
    "ValidationError",
    "__version__",
]
