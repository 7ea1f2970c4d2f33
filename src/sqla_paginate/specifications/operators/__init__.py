"""
Built-in operator strategies and the default registry.

``paginate`` compiles ``where`` and ``filter`` leaves with
``DEFAULT_SQLA_REGISTRY`` unless given a registry of its own::

    registry = DEFAULT_SQLA_REGISTRY.copy()
    registry.unregister(SpecificationOperator.LIKE)
    await paginate(query, source, config, registry=registry)
"""

from __future__ import annotations

from ..strategy import SQLAlchemyOperatorRegistry
from .comparison import COMPARISONS, Compare, Membership, Range
from .null import NullCheck
from .text import AFFIX_METHODS, ILIKE_TEMPLATES, Affix, InsensitiveAffix, Like


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """A fresh registry holding every built-in strategy."""
    return SQLAlchemyOperatorRegistry(
        [
            *(Compare(name) for name in COMPARISONS),
            Membership(),
            Membership(negated=True),
            Range(),
            Range(negated=True),
            Like(),
            Like(case_sensitive=False),
            *(Affix(name) for name in AFFIX_METHODS),
            *(InsensitiveAffix(name) for name in ILIKE_TEMPLATES),
            NullCheck(),
            NullCheck(negated=True),
        ]
    )


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "Affix",
    "Compare",
    "InsensitiveAffix",
    "Like",
    "Membership",
    "NullCheck",
    "Range",
    "build_default_sqla_registry",
]
