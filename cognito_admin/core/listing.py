"""Paged listing over an in-memory record snapshot.

Cognito's ListUsers/ListGroups calls have no server-side sorting and only
prefix filtering, so listings are emulated here: the caller fetches a
snapshot, and the engine filters, sorts and slices it into a page envelope.

Usage:
    engine = PagedListingEngine(GROUP_SCHEMA)
    engine.validate_sort(sort)               # before fetching anything
    page = engine.list(groups, sort, "test", PageRequest(page=0, size=20))
    page.to_dict(serialize=CognitoTransformer.group_to_dict)
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar

from .errors import InvalidSortFieldError

T = TypeVar("T")

ASCENDING = "asc"
DESCENDING = "desc"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def normalize_direction(direction: Optional[str]) -> str:
    """Map a client-supplied direction to 'asc' or 'desc' ('desc' is case-insensitive)."""
    if direction and direction.strip().lower() == DESCENDING:
        return DESCENDING
    return ASCENDING


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: str = ASCENDING

    @property
    def descending(self) -> bool:
        return self.direction == DESCENDING

    @classmethod
    def from_params(cls, sort_by: Optional[str], sort_direction: Optional[str] = None) -> Optional["SortSpec"]:
        """Build a SortSpec from query parameters; no sort field means no SortSpec."""
        if not sort_by:
            return None
        return cls(sort_by, normalize_direction(sort_direction))


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number and page size (size is clamped to MAX_PAGE_SIZE)."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page < 0:
            raise ValueError("page must be greater than or equal to 0")
        if self.size < 1:
            raise ValueError("size must be greater than or equal to 1")
        if self.size > MAX_PAGE_SIZE:
            object.__setattr__(self, "size", MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class PageResult(Generic[T]):
    content: list[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    is_last: bool
    sort_by: str
    sort_direction: str
    filter: Optional[str] = None

    def to_dict(self, serialize: Optional[Callable[[T], Any]] = None) -> dict:
        """Render the page envelope; `serialize` converts each record."""
        items = [serialize(item) for item in self.content] if serialize else list(self.content)
        return {
            "content": items,
            "page": self.page,
            "size": self.size,
            "totalElements": self.total_elements,
            "totalPages": self.total_pages,
            "last": self.is_last,
            "sortBy": self.sort_by,
            "sortDirection": self.sort_direction,
            "filter": self.filter,
        }


@dataclass(frozen=True)
class ListingSchema(Generic[T]):
    """Sortable and searchable fields of one record type.

    Attributes:
        name: Record type label used in error messages
        sort_keys: Allowed public sort field name -> key extractor
        filter_fields: Extractors of the string fields matched by text filters
        default_sort: Sort field used when the client does not pick one
    """

    name: str
    sort_keys: Mapping[str, Callable[[T], Any]]
    filter_fields: Sequence[Callable[[T], Optional[str]]]
    default_sort: str
    valid_fields: tuple[str, ...] = field(init=False)

    def __post_init__(self):
        if self.default_sort not in self.sort_keys:
            raise ValueError(f"default sort field {self.default_sort!r} is not sortable for {self.name}")
        object.__setattr__(self, "valid_fields", tuple(sorted(self.sort_keys)))


class PagedListingEngine(Generic[T]):
    """Filter, sort and paginate record snapshots of one record type."""

    def __init__(self, schema: ListingSchema[T]):
        self.schema = schema

    def validate_sort(self, sort: Optional[SortSpec]) -> SortSpec:
        """Return the effective sort, raising InvalidSortFieldError for unknown fields."""
        if sort is None:
            return SortSpec(self.schema.default_sort, ASCENDING)
        if sort.field not in self.schema.sort_keys:
            raise InvalidSortFieldError(sort.field, self.schema.valid_fields)
        return sort

    def list(
        self,
        records: Sequence[T],
        sort: Optional[SortSpec],
        text_filter: Optional[str],
        page: PageRequest,
    ) -> PageResult[T]:
        effective_sort = self.validate_sort(sort)

        matched = self.filter(records, text_filter)
        ordered = self.sort(matched, effective_sort)

        total_elements = len(ordered)
        total_pages = math.ceil(total_elements / page.size)

        start = page.offset
        if start >= total_elements:
            content: list[T] = []
            is_last = True
        else:
            content = ordered[start:min(start + page.size, total_elements)]
            is_last = page.page >= total_pages - 1

        return PageResult(
            content=content,
            page=page.page,
            size=page.size,
            total_elements=total_elements,
            total_pages=total_pages,
            is_last=is_last,
            sort_by=effective_sort.field,
            sort_direction=effective_sort.direction,
            filter=text_filter,
        )

    def filter(self, records: Sequence[T], text_filter: Optional[str]) -> list[T]:
        """Keep records where any filterable field contains the text, case-insensitively."""
        if not text_filter:
            return list(records)
        needle = text_filter.lower()
        return [
            record for record in records
            if any(
                value is not None and needle in value.lower()
                for value in (extract(record) for extract in self.schema.filter_fields)
            )
        ]

    def sort(self, records: Sequence[T], sort: SortSpec) -> list[T]:
        """Stable sort on the field key; records with a None key stay last in both directions."""
        key = self.schema.sort_keys[sort.field]
        present = [record for record in records if key(record) is not None]
        missing = [record for record in records if key(record) is None]
        present.sort(key=key, reverse=sort.descending)
        return present + missing
