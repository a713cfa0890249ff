import pytest
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIRequestFactory

from apps.common.pagination import (
    DEFAULT_PAGE_SIZE,
    Page,
    PageRequest,
    page_response,
    paginate,
)

SORTABLE = {"id": "id", "name": "name", "firstName": "first_name"}


class FakeQuerySet:
    def __init__(self, items):
        self._items = list(items)

    def count(self):
        return len(self._items)

    def __getitem__(self, item):
        return self._items[item]


class EchoSerializer:
    def __init__(self, items, many=False):
        self.data = list(items)


def test_defaults_when_no_parameters_given():
    pr = PageRequest.from_query_params({}, sortable=SORTABLE)
    assert pr == PageRequest(page=1, size=DEFAULT_PAGE_SIZE, sort=())
    assert pr.offset == 0


def test_sort_key_is_translated_and_id_appended():
    pr = PageRequest.from_query_params(
        {"page": "3", "size": "5", "sort": "firstName,desc"}, sortable=SORTABLE
    )
    assert pr.page == 3
    assert pr.offset == 10
    assert pr.ordering() == ["-first_name", "id"]


def test_sorting_on_id_does_not_duplicate_tie_breaker():
    pr = PageRequest(sort=(("id", "desc"),))
    assert pr.ordering() == ["-id"]


@pytest.mark.parametrize(
    "params",
    [
        {"page": "0"},
        {"size": "101"},
        {"size": "abc"},
        {"sort": "password"},
        {"sort": "name,sideways"},
    ],
)
def test_invalid_parameters_raise_validation_error(params):
    with pytest.raises(ValidationError):
        PageRequest.from_query_params(params, sortable=SORTABLE)


def test_paginate_slices_and_counts():
    page = paginate(FakeQuerySet(range(1, 26)), PageRequest(page=3, size=12))
    assert page.items == [25]
    assert page.total == 25
    assert page.total_pages == 3
    assert not page.has_next
    assert page.has_previous


def test_paginate_beyond_last_page_is_empty():
    page = paginate(FakeQuerySet(range(5)), PageRequest(page=4, size=2))
    assert page.items == []
    assert page.total == 5


def test_empty_result_has_zero_pages():
    page = Page(items=[], total=0)
    assert page.total_pages == 0
    assert not page.has_next
    assert not page.has_previous


def test_map_keeps_paging_metadata():
    page = Page(items=[1, 2], total=7, request=PageRequest(page=2, size=2))
    mapped = page.map(lambda n: n * 10)
    assert mapped.items == [10, 20]
    assert mapped.total == 7
    assert mapped.number == 2


def test_page_response_envelope_and_links():
    request = APIRequestFactory().get("/products", {"page": 2, "size": 2, "name": "tv"})
    page = Page(items=["c", "d"], total=5, request=PageRequest(page=2, size=2))
    response = page_response(request, page, EchoSerializer)
    data = response.data
    assert data["count"] == 5
    assert data["page"] == 2
    assert data["size"] == 2
    assert data["totalPages"] == 3
    assert data["results"] == ["c", "d"]
    assert "page=3" in data["next"]
    assert "name=tv" in data["next"]
    assert "page=" not in data["previous"]
