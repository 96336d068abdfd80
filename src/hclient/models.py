"""Value types exchanged with the platform."""

from dataclasses import dataclass, field
from typing import Any, TypeAlias

FieldValue: TypeAlias = str | int | float | bool | None

# Field API name -> value, in the platform's field order
BizRecord: TypeAlias = dict[str, FieldValue]

CODE_FIELD = "code"


@dataclass(frozen=True)
class ObjectMeta:
    """Summary of a business object type."""

    meta_name: str
    label: str | None = None
    category: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ObjectMeta":
        known = {"metaName", "label", "category"}
        return cls(
            meta_name=data["metaName"],
            label=data.get("label"),
            category=data.get("category"),
            extras={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class FieldMeta:
    name: str
    label: str | None = None
    type: str | None = None
    required: bool = False
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldMeta":
        known = {"name", "label", "type", "required"}
        return cls(
            name=data["name"],
            label=data.get("label"),
            type=data.get("type"),
            required=bool(data.get("required", False)),
            extras={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class ObjectMetaDetail:
    """Schema of a business object type and its fields."""

    meta_name: str
    label: str | None = None
    fields: list[FieldMeta] = field(default_factory=list)
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ObjectMetaDetail":
        known = {"metaName", "label", "fields"}
        return cls(
            meta_name=data["metaName"],
            label=data.get("label"),
            fields=[FieldMeta.from_dict(item) for item in data.get("fields") or []],
            extras={k: v for k, v in data.items() if k not in known},
        )

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def required_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.required]


@dataclass
class QueryOptions:
    """Structured query parameters.

    `query` is an exact-match filter (field -> expected value); anything richer
    goes through `query_data_by_sql`. None for `page_no`/`page_size` means the
    client default (page 1, configured page size).
    """

    select_fields: list[str] = field(default_factory=list)
    page_no: int | None = None
    page_size: int | None = None
    query: dict[str, FieldValue] = field(default_factory=dict)


@dataclass(frozen=True)
class QueryResult:
    """One page of records, in platform order."""

    records: list[BizRecord]
    total: int
    page_no: int = 1
    page_size: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "QueryResult":
        data = data or {}
        records = [dict(item) for item in data.get("records") or []]
        # the platform sends null for counters it did not compute
        total = data.get("totalCount")
        page_no = data.get("pageNo")
        return cls(
            records=records,
            total=int(total) if total is not None else len(records),
            page_no=int(page_no) if page_no is not None else 1,
            page_size=data.get("pageSize"),
        )

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
