"""
Validation Module
=================

Holdout splitting used for early stopping during tuning.
"""

from .holdout import make_holdout_split

__all__ = [
    "make_holdout_split",
]
