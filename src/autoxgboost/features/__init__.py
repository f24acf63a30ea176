"""
Feature Encoding Module
=======================

Conditional encoding of categorical features for tree models.

Key Components:
--------------
- partition_categorical_columns: Cardinality based split of factor columns
- ImpactEncoder: Smoothed target statistic per level
- DummyEncoder: One-hot encoding
"""

from .encoding import (
    DummyEncoder,
    ImpactEncoder,
    partition_categorical_columns,
)

__all__ = [
    "DummyEncoder",
    "ImpactEncoder",
    "partition_categorical_columns",
]
