"""
Exceptions raised by autoxgboost.
"""


class AutoXGBoostError(Exception):
    """Base class for all autoxgboost errors"""


class InvalidArgumentError(AutoXGBoostError, ValueError):
    """An argument has the wrong type or lies outside its allowed range"""


class UnsupportedTaskError(AutoXGBoostError):
    """The task type is neither classification nor regression"""


class ModelNotFittedError(AutoXGBoostError, RuntimeError):
    """A model was used before it was fitted"""
