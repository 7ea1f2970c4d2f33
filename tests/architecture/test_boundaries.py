from pytest_archon import archrule


def test_column_paths_are_pure() -> None:
    """
    Column path parsing and alias naming are plain string work.
    They must not depend on SQLAlchemy.
    """
    (
        archrule("column_paths_are_pure")
        .match("sqla_paginate.columns")
        .should_not_import("sqlalchemy*")
        .check("sqla_paginate")
    )


def test_models_are_pure() -> None:
    """Query, config and response models only depend on pydantic."""
    (
        archrule("models_are_pure")
        .match("sqla_paginate.types")
        .should_not_import("sqlalchemy*")
        .check("sqla_paginate")
    )


def test_predicates_do_not_know_the_request() -> None:
    """
    The predicate compiler and operator strategies work on trees, not on
    query-string filters or the paginate pipeline.
    """
    (
        archrule("predicates_independence")
        .match("sqla_paginate.specifications*")
        .should_not_import("sqla_paginate.filtering*")
        .should_not_import("sqla_paginate.paginate")
        .should_not_import("sqla_paginate.query_string")
        .check("sqla_paginate")
    )


def test_filtering_does_not_import_the_pipeline() -> None:
    """Filters are a stage composed by ``paginate``, never the other way round."""
    (
        archrule("filtering_below_pipeline")
        .match("sqla_paginate.filtering*")
        .should_not_import("sqla_paginate.paginate")
        .should_not_import("sqla_paginate.sorting")
        .should_not_import("sqla_paginate.search")
        .check("sqla_paginate")
    )


def test_resolver_is_below_predicates() -> None:
    """The column resolver is a leaf the predicate compiler builds on."""
    (
        archrule("resolver_is_leaf")
        .match("sqla_paginate.resolver")
        .should_not_import("sqla_paginate.specifications*")
        .should_not_import("sqla_paginate.filtering*")
        .check("sqla_paginate")
    )
