import pytest
from sqlalchemy import func

from sqla_paginate.operators import SpecificationOperator
from sqla_paginate.specifications import (
    And,
    Condition,
    Leaf,
    Not,
    Or,
    build_where_tree,
    compile_predicate,
    generate_where_statement,
)
from sqla_paginate.specifications.operators import build_default_sqla_registry
from sqla_paginate.specifications.strategy import (
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
)

from ..models import Post


def sql(expr) -> str:
    return str(expr.compile(compile_kwargs={"literal_binds": True}))


class TestBuildWhereTree:
    def test_object_is_and_of_flattened_leaves(self):
        tree = build_where_tree({"status": "live", "author": {"name": "Ann"}})
        assert tree == And(
            (
                Leaf("status", SpecificationOperator.EQ, "live"),
                Leaf("author.name", SpecificationOperator.EQ, "Ann"),
            )
        )

    def test_list_is_or_of_and_groups(self):
        tree = build_where_tree([{"status": "a"}, {"status": "b", "views": 1}])
        assert isinstance(tree, Or)
        assert [len(group.nodes) for group in tree.nodes] == [1, 2]

    def test_none_is_null_check(self):
        assert build_where_tree({"rating": None}) == And(
            (Leaf("rating", SpecificationOperator.IS_NULL),)
        )

    def test_condition_and_negation(self):
        tree = build_where_tree({"views": Condition(">", 3), "status": ~Condition("=", "a")})
        assert tree.nodes == (
            Leaf("views", SpecificationOperator.GT, 3),
            Not(Leaf("status", SpecificationOperator.EQ, "a")),
        )


class TestGenerateWhereStatement:
    def test_list_form_is_or(self, state):
        state = generate_where_statement(state, [{"status": "a"}, {"status": "b"}])
        assert sql(state.stmt.whereclause) == "__root.status = 'a' OR __root.status = 'b'"

    def test_object_form_is_and(self, state):
        state = generate_where_statement(state, {"status": "a", "title": "x"})
        assert sql(state.stmt.whereclause) == "__root.status = 'a' AND __root.title = 'x'"

    def test_mixed_groups(self, state):
        state = generate_where_statement(
            state, [{"status": "a", "views": 1}, {"status": "b"}]
        )
        assert sql(state.stmt.whereclause) == (
            "__root.status = 'a' AND __root.views = 1 OR __root.status = 'b'"
        )

    def test_relation_leaf_adds_join(self, state):
        state = generate_where_statement(state, {"author": {"publisher": {"name": "Acme"}}})
        assert "__root_author_rel_publisher_rel" in state.joins
        assert sql(state.stmt.whereclause) == "__root_author_rel_publisher_rel.name = 'Acme'"

    def test_empty_object_adds_nothing(self, state):
        assert generate_where_statement(state, {}).stmt.whereclause is None

    def test_negated_condition(self, state):
        state = generate_where_statement(state, {"rating": ~Condition("is_null")})
        assert sql(state.stmt.whereclause) == "__root.rating IS NOT NULL"


def test_compile_predicate_uses_given_registry(state):
    registry = SQLAlchemyOperatorRegistry()
    with pytest.raises(ValueError, match="Unsupported operator"):
        compile_predicate(state, Leaf("status", SpecificationOperator.EQ, "a"), registry)


def test_default_registry_covers_every_operator():
    registry = build_default_sqla_registry()
    assert registry.supported_operators == set(SpecificationOperator)


def test_registry_copy_is_independent():
    registry = build_default_sqla_registry()
    narrowed = registry.copy()
    narrowed.unregister(SpecificationOperator.LIKE)
    assert SpecificationOperator.LIKE not in narrowed
    assert narrowed.get(SpecificationOperator.LIKE) is None
    assert registry.has(SpecificationOperator.LIKE)


def test_registry_accepts_custom_strategy(state):
    class CaseFoldEqual(SQLAlchemyOperator):
        name = SpecificationOperator.EQ

        def apply(self, column, value):
            return func.lower(column) == value.lower()

    registry = build_default_sqla_registry()
    registry.register(CaseFoldEqual())
    state, clause = compile_predicate(
        state, Leaf("status", SpecificationOperator.EQ, "LIVE"), registry
    )
    assert sql(clause) == "lower(__root.status) = 'live'"
    assert repr(registry.get(SpecificationOperator.EQ)) == "CaseFoldEqual('=')"


@pytest.mark.parametrize(
    ("op", "column", "value", "expected"),
    [
        (SpecificationOperator.EQ, "title", "x", "posts.title = 'x'"),
        (SpecificationOperator.NE, "title", "x", "posts.title != 'x'"),
        (SpecificationOperator.GT, "views", 3, "posts.views > 3"),
        (SpecificationOperator.GE, "views", 3, "posts.views >= 3"),
        (SpecificationOperator.LT, "views", 3, "posts.views < 3"),
        (SpecificationOperator.LE, "views", 3, "posts.views <= 3"),
        (SpecificationOperator.IN, "views", [1, 2], "posts.views IN (1, 2)"),
        (SpecificationOperator.NOT_IN, "views", [1, 2], "posts.views NOT IN (1, 2)"),
        (SpecificationOperator.BETWEEN, "views", [1, 5], "posts.views BETWEEN 1 AND 5"),
        (
            SpecificationOperator.NOT_BETWEEN,
            "views",
            [1, 5],
            "posts.views NOT BETWEEN 1 AND 5",
        ),
        (SpecificationOperator.LIKE, "title", "a%", "posts.title LIKE 'a%'"),
        (
            SpecificationOperator.ILIKE,
            "title",
            "a%",
            "lower(posts.title) LIKE lower('a%')",
        ),
        (
            SpecificationOperator.ICONTAINS,
            "title",
            "ab",
            "lower(posts.title) LIKE lower('%ab%')",
        ),
        (
            SpecificationOperator.ISTARTSWITH,
            "title",
            "ab",
            "lower(posts.title) LIKE lower('ab%')",
        ),
        (
            SpecificationOperator.IENDSWITH,
            "title",
            "ab",
            "lower(posts.title) LIKE lower('%ab')",
        ),
        (SpecificationOperator.IS_NULL, "rating", None, "posts.rating IS NULL"),
        (SpecificationOperator.IS_NOT_NULL, "rating", None, "posts.rating IS NOT NULL"),
    ],
)
def test_operator_rendering(op, column, value, expected):
    registry = build_default_sqla_registry()
    assert expected in sql(registry.apply(op, getattr(Post, column), value))


@pytest.mark.parametrize(
    "op",
    [
        SpecificationOperator.CONTAINS,
        SpecificationOperator.STARTSWITH,
        SpecificationOperator.ENDSWITH,
    ],
)
def test_case_sensitive_pattern_operators(op):
    registry = build_default_sqla_registry()
    rendered = sql(registry.apply(op, Post.title, "a_b"))
    assert "posts.title LIKE" in rendered
    assert "lower(" not in rendered
