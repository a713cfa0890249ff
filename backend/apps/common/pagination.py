"""Page requests, page slices and their HTTP rendering.

Services receive a :class:`PageRequest` and hand back a :class:`Page`; views
parse the query string with :meth:`PageRequest.from_query_params` and render
the result with :func:`page_response`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.utils.urls import remove_query_param, replace_query_param

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100
ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    size: int = DEFAULT_PAGE_SIZE
    sort: Tuple[Tuple[str, str], ...] = ()

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def ordering(self, default: Sequence[str] = ("id",)) -> List[str]:
        """Django ``order_by`` arguments, with ``default`` appended as tie breaker."""
        fields = [
            f"-{name}" if direction == DESC else name for name, direction in self.sort
        ]
        used = {f.lstrip("-") for f in fields}
        fields.extend(f for f in default if f.lstrip("-") not in used)
        return fields

    @classmethod
    def from_query_params(
        cls,
        params: Mapping[str, Any],
        *,
        sortable: Mapping[str, str],
        default_size: int = DEFAULT_PAGE_SIZE,
    ) -> "PageRequest":
        """Build a request from ``page``/``size``/``sort`` query parameters.

        ``sortable`` maps public sort keys to model field names. Raises a DRF
        ``ValidationError`` for malformed values.
        """
        serializer = PageRequestSerializer(
            data={k: params.get(k) for k in ("page", "size", "sort") if params.get(k)},
            context={"sortable": sortable, "default_size": default_size},
        )
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return cls(
            page=data.get("page", 1),
            size=data.get("size", default_size),
            sort=data.get("sort", ()),
        )


class PageRequestSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False)
    size = serializers.IntegerField(min_value=1, max_value=MAX_PAGE_SIZE, required=False)
    sort = serializers.CharField(required=False)

    def validate_sort(self, value: str):
        sortable = self.context.get("sortable") or {}
        key, _, direction = value.partition(",")
        key = key.strip()
        direction = (direction.strip() or ASC).lower()
        if key not in sortable:
            allowed = ", ".join(sorted(sortable)) or "none"
            raise serializers.ValidationError(
                f"Unsupported sort field '{key}'. Allowed: {allowed}"
            )
        if direction not in (ASC, DESC):
            raise serializers.ValidationError("Sort direction must be 'asc' or 'desc'.")
        return ((sortable[key], direction),)


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    request: PageRequest = field(default_factory=PageRequest)

    @property
    def number(self) -> int:
        return self.request.page

    @property
    def size(self) -> int:
        return self.request.size

    @property
    def total_pages(self) -> int:
        if not self.total:
            return 0
        return math.ceil(self.total / self.size)

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    def map(self, fn: Callable[[T], R]) -> "Page[R]":
        return Page(items=[fn(item) for item in self.items], total=self.total, request=self.request)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def paginate(queryset, page_request: PageRequest) -> Page:
    """Slice ``queryset`` according to ``page_request``.

    Out-of-range pages yield an empty item list rather than an error.
    """
    total = queryset.count()
    start = page_request.offset
    items = list(queryset[start:start + page_request.size]) if start < total else []
    return Page(items=items, total=total, request=page_request)


def _page_link(request, page: Page, number: int) -> Optional[str]:
    url = request.build_absolute_uri()
    if number == 1:
        return remove_query_param(url, "page")
    return replace_query_param(url, "page", number)


def page_response(request, page: Page, serializer_class) -> Response:
    """Render ``page`` in the listing envelope shared by every collection."""
    results: Iterable[Any] = serializer_class(page.items, many=True).data
    return Response(
        {
            "count": page.total,
            "page": page.number,
            "size": page.size,
            "totalPages": page.total_pages,
            "next": _page_link(request, page, page.number + 1) if page.has_next else None,
            "previous": (
                _page_link(request, page, min(page.number - 1, max(page.total_pages, 1)))
                if page.has_previous
                else None
            ),
            "results": results,
        }
    )


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "Page",
    "PageRequest",
    "page_response",
    "paginate",
]
