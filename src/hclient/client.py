"""Public entry point for the platform API."""

from collections.abc import Sequence

import httpx

from hclient.auth.manager import CredentialManager
from hclient.config import Config
from hclient.models import BizRecord, ObjectMeta, ObjectMetaDetail, QueryOptions, QueryResult
from hclient.services.metadata import MetadataService
from hclient.services.records import RecordService
from hclient.transport.dispatcher import RequestDispatcher


class HClient:
    """Client for business objects and business data records.

    One instance owns one HTTP connection pool and one access token shared by
    all of its calls. Use it as an async context manager, or call `aclose()`.

    Args:
        config: Connection parameters.
        transport: Optional httpx transport, e.g. `httpx.MockTransport` in tests.
        http_client: Optional pre-built client; it is not closed by `aclose()`.

    Example:
        ```python
        async with HClient(config) as client:
            code = await client.create_data("lead", {"name": "ACME", "status": "open"})
            lead = await client.get_data("lead", code)
            page = await client.query_data("lead", QueryOptions(query={"status": "open"}))
        ```
    """

    def __init__(
        self,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )
        self.credentials = CredentialManager(config, self._http_client)
        dispatcher = RequestDispatcher(self._http_client, self.credentials)
        self._objects = MetadataService(dispatcher)
        self._records = RecordService(dispatcher, default_page_size=config.page_size)

    async def __aenter__(self) -> "HClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def get_objects(self) -> list[ObjectMeta]:
        """List business object types."""
        return await self._objects.get_objects()

    async def get_object_description(self, meta_name: str) -> ObjectMetaDetail:
        """Describe one business object type and its fields."""
        return await self._objects.get_object_description(meta_name)

    async def create_data(self, meta_name: str, data: BizRecord) -> str:
        """Create a record; returns its code."""
        return await self._records.create_data(meta_name, data)

    async def update_data(self, meta_name: str, code: str, data: BizRecord) -> str:
        """Update the record `code`; returns its code."""
        return await self._records.update_data(meta_name, code, data)

    async def batch_create_data(self, meta_name: str, records: Sequence[BizRecord]) -> list[str]:
        """Create up to 30 records; returns their codes in input order."""
        return await self._records.batch_create_data(meta_name, records)

    async def batch_update_data(self, meta_name: str, records: Sequence[BizRecord]) -> list[str]:
        """Update up to 30 records, each carrying its `code`; returns codes in input order."""
        return await self._records.batch_update_data(meta_name, records)

    async def delete_data(self, meta_name: str, code: str) -> str:
        """Delete the record `code`; returns its code."""
        return await self._records.delete_data(meta_name, code)

    async def get_data(self, meta_name: str, code: str) -> BizRecord:
        """Fetch the record `code`."""
        return await self._records.get_data(meta_name, code)

    async def query_data(self, meta_name: str, options: QueryOptions | None = None) -> QueryResult:
        """Query records by exact field values. Defaults to page 1 of the configured page size."""
        return await self._records.query_data(meta_name, options)

    async def query_data_by_sql(self, sql: str) -> QueryResult:
        """Run a platform SQL statement (where, order by, limit, offset), sent unmodified."""
        return await self._records.query_data_by_sql(sql)

    async def query_auxiliary_data(self, meta_name: str, options: QueryOptions | None = None) -> QueryResult:
        """Query auxiliary or built-in object records by exact field values."""
        return await self._records.query_auxiliary_data(meta_name, options)

    async def transfer_owner(
        self,
        meta_name: str,
        code: str,
        new_owner: str,
        add_team: bool,
        dept_follow_new_owner: bool,
    ) -> str:
        """Transfer a record to `new_owner`.

        Args:
            meta_name: Object type API name.
            code: Record code.
            new_owner: Code of the new owner.
            add_team: Keep the current owner as a follower.
            dept_follow_new_owner: Align the record's department with the new owner's.
        """
        return await self._records.transfer_owner(meta_name, code, new_owner, add_team, dept_follow_new_owner)
