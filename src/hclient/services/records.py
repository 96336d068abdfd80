"""Business data record operations.

All argument checks run before anything is dispatched, so a rejected call
costs no round trip and no token refresh.
"""

import logging
from collections.abc import Sequence
from typing import Any
from urllib.parse import quote

from hclient.errors.exceptions import UpstreamError, ValidationError
from hclient.errors.handler import parse_payload
from hclient.models import CODE_FIELD, BizRecord, QueryOptions, QueryResult
from hclient.transport.dispatcher import ApiRequest, RequestDispatcher

logger = logging.getLogger(__name__)

# Platform limit on records per batch call
MAX_BATCH_SIZE = 30

DEFAULT_PAGE_NO = 1


def _segment(value: str) -> str:
    return quote(value, safe="")


def _require(value: str, name: str) -> None:
    if not value:
        raise ValidationError(f"{name} must not be empty")


def _check_batch(records: Sequence[BizRecord]) -> None:
    if not records:
        raise ValidationError("records must contain at least one record")
    if len(records) > MAX_BATCH_SIZE:
        raise ValidationError(f"records must contain at most {MAX_BATCH_SIZE} records, got {len(records)}")


def _code_of(data: Any) -> str:
    if isinstance(data, dict):
        data = data.get(CODE_FIELD)
    if not isinstance(data, str) or not data:
        raise UpstreamError(f"Platform response carries no record code: {data!r}")
    return data


def _codes_of(data: Any, expected: int) -> list[str]:
    if isinstance(data, dict):
        data = data.get("codes")
    if not isinstance(data, list) or len(data) != expected:
        raise UpstreamError(f"Platform returned {data!r} for a batch of {expected} records")
    return [_code_of(item) for item in data]


def _query_result(data: Any) -> QueryResult:
    if data is not None and not isinstance(data, dict):
        raise UpstreamError(f"Platform returned {type(data).__name__} for a query page")
    return parse_payload(QueryResult.from_dict, data, "query page")


class RecordService:
    """Create, read, update, delete, query and reassign business records.

    Args:
        dispatcher: Authenticated request dispatcher.
        default_page_size: Page size used when QueryOptions leaves it unset.
    """

    def __init__(self, dispatcher: RequestDispatcher, default_page_size: int = 10) -> None:
        self._dispatcher = dispatcher
        self._default_page_size = default_page_size

    async def create_data(self, meta_name: str, record: BizRecord) -> str:
        """Create a record and return its platform-assigned code.

        Raises:
            ValidationError: The record already carries a code, or the
                platform rejected it (e.g. a required field is missing).
        """
        _require(meta_name, "meta_name")
        if CODE_FIELD in record:
            raise ValidationError("a new record must not carry a code")
        data = await self._dispatcher.send(ApiRequest("POST", f"/v1/data/objects/{_segment(meta_name)}", json=record))
        return _code_of(data)

    async def update_data(self, meta_name: str, code: str, record: BizRecord) -> str:
        _require(meta_name, "meta_name")
        _require(code, "code")
        path = f"/v1/data/objects/{_segment(meta_name)}/{_segment(code)}"
        data = await self._dispatcher.send(ApiRequest("PUT", path, json=record))
        return _code_of(data)

    async def batch_create_data(self, meta_name: str, records: Sequence[BizRecord]) -> list[str]:
        """Create 1 to 30 records; codes come back in input order."""
        _require(meta_name, "meta_name")
        _check_batch(records)
        for index, record in enumerate(records):
            if CODE_FIELD in record:
                raise ValidationError(f"record {index} must not carry a code")
        path = f"/v1/data/objects/{_segment(meta_name)}/batch-create"
        data = await self._dispatcher.send(ApiRequest("POST", path, json={"records": list(records)}))
        return _codes_of(data, len(records))

    async def batch_update_data(self, meta_name: str, records: Sequence[BizRecord]) -> list[str]:
        """Update 1 to 30 records, each identified by its `code` field."""
        _require(meta_name, "meta_name")
        _check_batch(records)
        for index, record in enumerate(records):
            if not record.get(CODE_FIELD):
                raise ValidationError(f"record {index} has no code")
        path = f"/v1/data/objects/{_segment(meta_name)}/batch-update"
        data = await self._dispatcher.send(ApiRequest("POST", path, json={"records": list(records)}))
        return _codes_of(data, len(records))

    async def delete_data(self, meta_name: str, code: str) -> str:
        _require(meta_name, "meta_name")
        _require(code, "code")
        path = f"/v1/data/objects/{_segment(meta_name)}/{_segment(code)}"
        data = await self._dispatcher.send(ApiRequest("DELETE", path))
        return _code_of(data) if data else code

    async def get_data(self, meta_name: str, code: str) -> BizRecord:
        _require(meta_name, "meta_name")
        _require(code, "code")
        path = f"/v1/data/objects/{_segment(meta_name)}/{_segment(code)}"
        data = await self._dispatcher.send(ApiRequest("GET", path))
        if not isinstance(data, dict):
            raise UpstreamError(f"Platform returned {type(data).__name__} for record {code}")
        return data

    def _query_body(self, options: QueryOptions) -> dict[str, Any]:
        page_no = options.page_no if options.page_no is not None else DEFAULT_PAGE_NO
        page_size = options.page_size if options.page_size is not None else self._default_page_size
        if page_no < 1:
            raise ValidationError(f"page_no is 1-based, got {page_no}")
        if page_size < 1:
            raise ValidationError(f"page_size must be positive, got {page_size}")
        return {
            "selectFields": list(options.select_fields),
            "pageNo": page_no,
            "pageSize": page_size,
            "conditions": [{"field": name, "operator": "eq", "value": value} for name, value in options.query.items()],
        }

    async def query_data(self, meta_name: str, options: QueryOptions | None = None) -> QueryResult:
        _require(meta_name, "meta_name")
        body = self._query_body(options or QueryOptions())
        data = await self._dispatcher.send(ApiRequest("POST", f"/v1/data/objects/{_segment(meta_name)}/query", json=body))
        return _query_result(data)

    async def query_auxiliary_data(self, meta_name: str, options: QueryOptions | None = None) -> QueryResult:
        """Same as query_data, for auxiliary and built-in object types."""
        _require(meta_name, "meta_name")
        body = self._query_body(options or QueryOptions())
        data = await self._dispatcher.send(ApiRequest("POST", f"/v1/data/auxiliary/{_segment(meta_name)}/query", json=body))
        return _query_result(data)

    async def query_data_by_sql(self, sql: str) -> QueryResult:
        """Run a platform SQL query.

        The statement is sent exactly as given: no parsing, escaping or
        validation happens here.
        """
        _require(sql, "sql")
        data = await self._dispatcher.send(ApiRequest("POST", "/v1/data/sql", json={"sql": sql}))
        return _query_result(data)

    async def transfer_owner(
        self,
        meta_name: str,
        code: str,
        new_owner: str,
        add_team: bool,
        dept_follow_new_owner: bool,
    ) -> str:
        """Reassign a record to `new_owner`.

        Args:
            add_team: Keep the previous owner on the record as a follower.
            dept_follow_new_owner: Move the record to the new owner's department.

        Raises:
            NotFoundError: The record or the new owner does not exist.
        """
        _require(meta_name, "meta_name")
        _require(code, "code")
        _require(new_owner, "new_owner")
        path = f"/v1/data/objects/{_segment(meta_name)}/{_segment(code)}/owner"
        body = {
            "newOwner": new_owner,
            "addTeam": 1 if add_team else 0,
            "deptFollowNewOwner": 1 if dept_follow_new_owner else 0,
        }
        data = await self._dispatcher.send(ApiRequest("POST", path, json=body))
        logger.info(f"Transferred {meta_name}/{code} to owner {new_owner}")
        return _code_of(data) if data else code
