import pytest

from querying.pagination import MAX_LIMIT, SortDirection, normalize, total_pages


def test_defaults():
    params = normalize()

    assert params.page == 1
    assert params.limit == 20
    assert params.skip == 0
    assert params.sort_field == "start_time"
    assert params.sort_direction == SortDirection.DESC


@pytest.mark.parametrize("requested, expected", [(500, MAX_LIMIT), (101, 100), (100, 100), (0, 1), (-3, 1), (7, 7)])
def test_limit_is_clamped(requested, expected):
    assert normalize(limit=requested).limit == expected


@pytest.mark.parametrize("page, limit, skip", [(1, 10, 0), (2, 10, 10), (3, 25, 50), (4, 1000, 300)])
def test_skip_follows_page_and_clamped_limit(page, limit, skip):
    params = normalize(page=page, limit=limit)
    assert params.skip == (params.page - 1) * params.limit == skip


def test_page_below_one_becomes_first_page():
    assert normalize(page=0).page == 1
    assert normalize(page=-2).skip == 0


def test_sort_options():
    params = normalize(sort_by="total_duration_ms", sort_order="asc")
    assert params.sort_field == "total_duration_ms"
    assert params.sort_direction == SortDirection.ASC

    assert normalize(sort_order="sideways").sort_direction == SortDirection.DESC
    assert normalize(default_sort_field="created_at").sort_field == "created_at"


@pytest.mark.parametrize(
    "total, limit, pages",
    [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (25, 10, 3), (100, 100, 1)],
)
def test_total_pages(total, limit, pages):
    assert total_pages(total, limit) == pages
