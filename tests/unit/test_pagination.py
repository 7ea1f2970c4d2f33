from dataclasses import replace

import pytest

from sqla_paginate.pagination import (
    apply_pagination,
    get_pagination_limit,
    is_paginated,
    positive_number_or_default,
    total_pages,
)
from sqla_paginate.types import PaginateConfig, PaginateQuery, PaginationType


def config(**kwargs) -> PaginateConfig:
    return PaginateConfig(sortable_columns=["id"], **kwargs)


def sql(stmt) -> str:
    return str(stmt.compile(compile_kwargs={"literal_binds": True}))


class TestIsPaginated:
    def test_counter_only(self):
        assert not is_paginated(PaginateQuery(limit=0), config())

    def test_no_pagination_needs_both_sides(self):
        assert not is_paginated(PaginateQuery(limit=-1), config(max_limit=-1))
        assert is_paginated(PaginateQuery(limit=-1), config())
        assert is_paginated(PaginateQuery(), config(max_limit=-1))


class TestGetPaginationLimit:
    @pytest.mark.parametrize(
        ("limit", "cfg", "expected"),
        [
            (0, {}, 0),
            (None, {}, 20),
            (None, {"default_limit": 5}, 5),
            (50, {"max_limit": 20}, 20),
            (10, {"max_limit": 20}, 10),
            (None, {"max_limit": -1}, 20),
            (500, {"max_limit": -1}, 500),
            (-1, {}, 20),
            (-7, {"default_limit": 5}, 5),
            (None, {"default_limit": 0, "max_limit": 0}, 20),
            (200, {"default_limit": 0, "max_limit": 0}, 100),
        ],
    )
    def test_effective_limit(self, limit, cfg, expected):
        query = PaginateQuery(limit=limit)
        cfg = config(**cfg)
        assert get_pagination_limit(query, is_paginated(query, cfg), cfg) == expected

    def test_unpaginated_reports_default(self):
        assert get_pagination_limit(PaginateQuery(limit=-1), False, config()) == 20


def test_positive_number_or_default():
    assert positive_number_or_default(None, 1) == 1
    assert positive_number_or_default(0, 1, 1) == 1
    assert positive_number_or_default(0, 1) == 0
    assert positive_number_or_default(3, 1, 1) == 3


class TestApplyPagination:
    def test_limit_and_offset(self, state):
        query = PaginateQuery(page=3, limit=10)
        new_state = apply_pagination(
            state, query, config(pagination_type=PaginationType.LIMIT_AND_OFFSET)
        )
        assert "LIMIT 10 OFFSET 20" in sql(new_state.stmt)
        assert (new_state.page, new_state.limit, new_state.is_paginated) == (3, 10, True)

    def test_take_and_skip_renders_the_same(self, state):
        query = PaginateQuery(page=3, limit=10)
        take = apply_pagination(state, query, config())
        limit = apply_pagination(
            state, query, config(pagination_type="limit")
        )
        assert sql(take.stmt) == sql(limit.stmt)

    def test_page_below_one_is_first_page(self, state):
        new_state = apply_pagination(state, PaginateQuery(page=-2, limit=10), config())
        assert new_state.page == 1
        assert "LIMIT 10" in sql(new_state.stmt)
        assert "OFFSET" not in sql(new_state.stmt)

    def test_unpaginated_adds_no_limit(self, state):
        new_state = apply_pagination(state, PaginateQuery(limit=-1), config(max_limit=-1))
        assert not new_state.is_paginated
        assert "LIMIT" not in sql(new_state.stmt)
        assert new_state.limit == 20

    def test_counter_only(self, state):
        new_state = apply_pagination(state, PaginateQuery(limit=0), config())
        assert (new_state.limit, new_state.is_paginated) == (0, False)


def test_total_pages(state):
    paginated = replace(state, is_paginated=True, limit=10)
    assert total_pages(paginated, 25) == 3
    assert total_pages(paginated, 0) == 0
    assert total_pages(replace(state, is_paginated=False), 25) == 1
