import logging

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import mysql, postgresql
from sqlalchemy.orm import aliased

from sqla_paginate.exceptions import MissingSortableColumnsError
from sqla_paginate.resolver import QueryState
from sqla_paginate.sorting import apply_sorting, resolve_sort_by
from sqla_paginate.types import NullSort, PaginateConfig, PaginateQuery

from ..models import Post


def order_by(state, dialect=None) -> str:
    sql = str(
        state.stmt.compile(dialect=dialect, compile_kwargs={"literal_binds": True})
    )
    return sql.split("ORDER BY ", 1)[1]


class TestResolveSortBy:
    def test_falls_back_to_first_sortable_column(self):
        config = PaginateConfig(sortable_columns=["id", "title"])
        assert resolve_sort_by(PaginateQuery(), config) == [("id", "ASC")]

    def test_falls_back_to_default_sort_by(self):
        config = PaginateConfig(
            sortable_columns=["id", "title"], default_sort_by=[("title", "DESC")]
        )
        assert resolve_sort_by(PaginateQuery(), config) == [("title", "DESC")]

    def test_invalid_entries_are_dropped(self):
        config = PaginateConfig(sortable_columns=["id", "title"])
        query = PaginateQuery(
            sort_by=[("views", "ASC"), ("title", "sideways"), ("id", "desc")]
        )
        assert resolve_sort_by(query, config) == [("id", "DESC")]

    def test_all_invalid_uses_default(self):
        config = PaginateConfig(sortable_columns=["title"])
        query = PaginateQuery(sort_by=[("views", "ASC")])
        assert resolve_sort_by(query, config) == [("title", "ASC")]


class TestApplySorting:
    def test_records_applied_sort(self, state):
        config = PaginateConfig(sortable_columns=["id", "title"])
        query = PaginateQuery(sort_by=[("title", "DESC"), ("id", "ASC")])
        new_state = apply_sorting(state, query, config)
        assert new_state.sort_by == [("title", "DESC"), ("id", "ASC")]
        assert order_by(new_state) == "__root.title DESC, __root.id ASC"

    def test_nulls_last_on_postgres(self, make_state):
        config = PaginateConfig(sortable_columns=["rating"], null_sort=NullSort.LAST)
        new_state = apply_sorting(make_state("postgresql"), PaginateQuery(), config)
        assert order_by(new_state, postgresql.dialect()) == (
            "__root.rating ASC NULLS LAST"
        )

    def test_nulls_first_on_postgres(self, make_state):
        config = PaginateConfig(sortable_columns=["rating"], null_sort="first")
        query = PaginateQuery(sort_by=[("rating", "DESC")])
        new_state = apply_sorting(make_state("postgresql"), query, config)
        assert order_by(new_state, postgresql.dialect()) == (
            "__root.rating DESC NULLS FIRST"
        )

    def test_nulls_last_on_mysql(self, make_state):
        config = PaginateConfig(sortable_columns=["rating"], null_sort=NullSort.LAST)
        new_state = apply_sorting(make_state("mysql"), PaginateQuery(), config)
        assert order_by(new_state, mysql.dialect()) == (
            "__root.rating IS NULL, __root.rating ASC"
        )

    def test_nulls_first_on_mariadb(self, make_state):
        config = PaginateConfig(sortable_columns=["rating"], null_sort=NullSort.FIRST)
        new_state = apply_sorting(make_state("mariadb"), PaginateQuery(), config)
        assert order_by(new_state, mysql.dialect()) == (
            "__root.rating IS NOT NULL, __root.rating ASC"
        )

    def test_relation_column_joins(self, state):
        config = PaginateConfig(sortable_columns=["author.name"])
        new_state = apply_sorting(state, PaginateQuery(), config)
        assert "__root_author_rel" in new_state.joins
        assert order_by(new_state) == "__root_author_rel.name ASC"

    def test_virtual_query_column(self, state):
        config = PaginateConfig(sortable_columns=["title_length"])
        query = PaginateQuery(sort_by=[("title_length", "DESC")])
        new_state = apply_sorting(state, query, config)
        assert order_by(new_state) == "(SELECT LENGTH(__root.title)) DESC"

    def test_missing_sortable_columns(self, state, caplog):
        config = PaginateConfig(sortable_columns=[])
        with caplog.at_level(logging.DEBUG, logger="sqla_paginate.sorting"):
            with pytest.raises(MissingSortableColumnsError):
                apply_sorting(state, PaginateQuery(), config)
        assert "sortable_columns" in caplog.text

    def test_missing_sortable_columns_uses_given_logger(self, state, caplog):
        config = PaginateConfig(sortable_columns=[])
        log = logging.getLogger("posts.api")
        with caplog.at_level(logging.DEBUG, logger="posts.api"):
            with pytest.raises(MissingSortableColumnsError):
                apply_sorting(state, PaginateQuery(), config, log=log)
        assert [r.name for r in caplog.records] == ["posts.api"]


@pytest.mark.parametrize(
    ("dialect", "expected"),
    [
        (mysql.dialect(), "`Root`.rating IS NULL, `Root`.rating ASC"),
        (postgresql.dialect(), '"Root".rating ASC NULLS LAST'),
    ],
)
def test_identifiers_are_quoted_per_dialect(dialect, expected):
    root = aliased(Post, name="Root")
    state = QueryState(
        stmt=select(root), root=root, root_alias="Root", dialect=dialect.name
    )
    config = PaginateConfig(sortable_columns=["rating"], null_sort=NullSort.LAST)
    new_state = apply_sorting(state, PaginateQuery(), config)
    assert order_by(new_state, dialect) == expected
