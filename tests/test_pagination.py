from __future__ import annotations

from urllib.parse import parse_qs

from crud_query import Page, QueryConfig, QueryStringBuilder


def test_page_metadata() -> None:
    page = Page(items=[1, 2], total=5, page=2, per_page=2)
    assert page.last_page == 3
    assert page.has_more
    assert page.previous_page == 1
    assert page.next_page == 3


def test_last_page() -> None:
    page = Page(items=[5], total=5, page=3, per_page=2)
    assert not page.has_more
    assert page.next_page is None


def test_empty_result_has_one_page() -> None:
    page = Page(items=[], total=0, page=1, per_page=10)
    assert page.last_page == 1
    assert page.previous_page is None
    assert page.next_page is None


def test_to_dict() -> None:
    assert Page(items=["a"], total=1, page=1, per_page=10).to_dict() == {
        "data": ["a"],
        "total": 1,
        "per_page": 10,
        "current_page": 1,
        "last_page": 1,
    }


def test_query_string_overrides() -> None:
    builder = QueryStringBuilder()
    qs = builder.build({"title": "SQL", "page": "1", "sort": ["a", "views"]}, page=2)
    assert parse_qs(qs) == {"title": ["SQL"], "page": ["2"], "sort": ["views"]}


def test_none_override_removes_key() -> None:
    qs = QueryStringBuilder().build({"title": "SQL", "take": "5"}, take=None)
    assert parse_qs(qs) == {"title": ["SQL"]}


def test_page_links() -> None:
    page = Page(items=[], total=25, page=2, per_page=10)
    links = QueryStringBuilder().page_links({"title": "SQL", "page": "2"}, page)
    assert parse_qs(links["first"]) == {
        "title": ["SQL"],
        "page": ["1"],
        "limit": ["10"],
    }
    assert parse_qs(links["last"])["page"] == ["3"]
    assert parse_qs(links["prev"])["page"] == ["1"]
    assert parse_qs(links["next"])["page"] == ["3"]


def test_page_links_use_configured_keys() -> None:
    page = Page(items=[], total=3, page=1, per_page=10)
    builder = QueryStringBuilder(QueryConfig(page_key="p", limit_key="size"))
    links = builder.page_links({}, page)
    assert parse_qs(links["first"]) == {"p": ["1"], "size": ["10"]}
    assert links["prev"] is None
    assert links["next"] is None
