"""Candidate extraction from rendered documents."""

from .strategies import (  # noqa: F401
    AllElementsStrategy,
    ExtractionStrategy,
    StructuralSelectorsStrategy,
    available_strategies,
    get_strategy,
)

__all__ = [
    "AllElementsStrategy",
    "ExtractionStrategy",
    "StructuralSelectorsStrategy",
    "available_strategies",
    "get_strategy",
]
