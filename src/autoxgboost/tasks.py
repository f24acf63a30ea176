"""
Supervised Learning Tasks
=========================

A ``Task`` couples a data frame with the name of its target column and the
kind of problem to solve. Classification and regression tasks can be tuned;
other task types can be described but are rejected by the tuner.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from pandas.api.types import (
    is_bool_dtype,
    is_numeric_dtype,
    is_object_dtype,
    is_string_dtype,
)

from .exceptions import InvalidArgumentError


class TaskType(Enum):
    """Supervised learning problem types"""
    CLASSIFICATION = "classif"
    REGRESSION = "regr"
    SURVIVAL = "surv"
    RANKING = "ranking"
    CLUSTER = "cluster"


def is_categorical_column(column: pd.Series) -> bool:
    """Object, string and category columns are treated as factors."""
    if is_bool_dtype(column):
        return False
    return (
        isinstance(column.dtype, pd.CategoricalDtype)
        or is_object_dtype(column)
        or is_string_dtype(column)
    )


def count_levels(column: pd.Series) -> int:
    """Number of levels of a categorical column, unused categories included."""
    if isinstance(column.dtype, pd.CategoricalDtype):
        return len(column.cat.categories)
    return int(column.nunique(dropna=True))


def column_levels(column: pd.Series) -> List[Any]:
    """Levels in categorical order, or sorted for plain object columns."""
    if isinstance(column.dtype, pd.CategoricalDtype):
        return list(column.cat.categories)
    values = pd.unique(column.dropna())
    try:
        return sorted(values)
    except TypeError:
        return sorted(values, key=str)


@dataclass(eq=False)
class Task:
    """
    Dataset plus target and task type.

    Args:
        data: Feature columns and the target column
        target: Name of the target column
        task_type: Explicit task type; inferred from the target if omitted
        positive: Positive class for binary classification
        task_id: Optional name used in logs
    """

    data: pd.DataFrame
    target: str
    task_type: Optional[Union[TaskType, str]] = None
    positive: Any = None
    task_id: Optional[str] = None

    class_levels: List[Any] = field(init=False, default_factory=list)

    def __post_init__(self):
        if not isinstance(self.data, pd.DataFrame):
            raise InvalidArgumentError(
                f"data must be a pandas DataFrame, got {type(self.data).__name__}"
            )
        if self.data.empty:
            raise InvalidArgumentError("data must not be empty")
        if self.target not in self.data.columns:
            raise InvalidArgumentError(f"Target column '{self.target}' not found in data")

        if self.task_type is None:
            self.task_type = self._infer_task_type(self.data[self.target])
        elif not isinstance(self.task_type, TaskType):
            try:
                self.task_type = TaskType(self.task_type)
            except ValueError:
                raise InvalidArgumentError(f"Unknown task type: {self.task_type!r}") from None

        if self.task_id is None:
            self.task_id = f"{self.task_type.value}.{self.target}"

        if self.task_type == TaskType.CLASSIFICATION:
            self._setup_class_levels()
        elif self.positive is not None:
            raise InvalidArgumentError("positive is only meaningful for classification tasks")

    @staticmethod
    def _infer_task_type(y: pd.Series) -> TaskType:
        if is_bool_dtype(y) or is_categorical_column(y):
            return TaskType.CLASSIFICATION
        if is_numeric_dtype(y):
            return TaskType.REGRESSION
        raise InvalidArgumentError(f"Cannot infer task type from target dtype {y.dtype}")

    def _setup_class_levels(self):
        y = self.data[self.target]
        if y.isna().any():
            raise InvalidArgumentError("Classification target must not contain missing values")
        levels = column_levels(y)
        if len(levels) < 2:
            raise InvalidArgumentError(
                f"Classification needs at least 2 class levels, got {len(levels)}"
            )
        if self.positive is not None:
            if self.positive not in levels:
                raise InvalidArgumentError(
                    f"Positive class {self.positive!r} is not a level of the target"
                )
            if len(levels) > 2:
                raise InvalidArgumentError("positive can only be set for binary classification")
            levels = [lvl for lvl in levels if lvl != self.positive] + [self.positive]
        elif len(levels) == 2:
            self.positive = levels[-1]
        self.class_levels = levels

    @property
    def feature_names(self) -> List[str]:
        return [col for col in self.data.columns if col != self.target]

    @property
    def features(self) -> pd.DataFrame:
        return self.data[self.feature_names]

    @property
    def y(self) -> pd.Series:
        return self.data[self.target]

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def n_classes(self) -> int:
        return len(self.class_levels)

    @property
    def is_binary(self) -> bool:
        return self.task_type == TaskType.CLASSIFICATION and self.n_classes == 2

    @property
    def n_features(self) -> Dict[str, int]:
        """Feature counts by kind: numerics, factors and ordered factors"""
        counts = {"numerics": 0, "factors": 0, "ordered": 0, "other": 0}
        for col in self.feature_names:
            column = self.data[col]
            if isinstance(column.dtype, pd.CategoricalDtype) and column.cat.ordered:
                counts["ordered"] += 1
            elif is_categorical_column(column):
                counts["factors"] += 1
            elif is_numeric_dtype(column):
                counts["numerics"] += 1
            else:
                counts["other"] += 1
        return counts

    @property
    def categorical_columns(self) -> List[str]:
        return [col for col in self.feature_names if is_categorical_column(self.data[col])]

    @property
    def has_categorical_features(self) -> bool:
        counts = self.n_features
        return counts["factors"] + counts["ordered"] > 0

    def subset(self, index: Sequence[int]) -> "Task":
        """Task restricted to the rows at the given positions."""
        return Task(
            data=self.data.iloc[np.asarray(index)].reset_index(drop=True),
            target=self.target,
            task_type=self.task_type,
            positive=self.positive if self.is_binary else None,
            task_id=self.task_id,
        )

    def __repr__(self) -> str:
        text = (
            f"Task(id={self.task_id!r}, type={self.task_type.value}, "
            f"observations={self.size}, features={len(self.feature_names)}"
        )
        if self.task_type == TaskType.CLASSIFICATION:
            text += f", classes={self.class_levels}"
        return text + ")"


def make_classif_task(
    data: pd.DataFrame,
    target: str,
    positive: Any = None,
    task_id: Optional[str] = None,
) -> Task:
    """Create a classification task."""
    return Task(data, target, TaskType.CLASSIFICATION, positive=positive, task_id=task_id)


def make_regr_task(data: pd.DataFrame, target: str, task_id: Optional[str] = None) -> Task:
    """Create a regression task."""
    return Task(data, target, TaskType.REGRESSION, task_id=task_id)
