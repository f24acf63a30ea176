"""
Utilities Module
================

Persistence and plotting helpers for tuning results.
"""

from .model_utils import ModelLoader, ModelSaver
from .plotting import plot_optimization_history

__all__ = [
    "ModelLoader",
    "ModelSaver",
    "plot_optimization_history",
]
