"""
Categorical Feature Encoding for XGBoost
========================================

XGBoost needs numeric input, so factor columns are encoded before training.
Which encoding a column gets depends on its cardinality:

- Low cardinality (levels <= boundary): dummy (one-hot) encoding
- High cardinality (levels > boundary): impact encoding, i.e. each level is
  replaced by a smoothed statistic of the target observed for that level

Both encoders are scikit-learn transformers working on pandas DataFrames so
they can sit in a ``Pipeline`` in front of the learner.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from loguru import logger
from sklearn.base import BaseEstimator, TransformerMixin

from ..exceptions import InvalidArgumentError, ModelNotFittedError
from ..tasks import TaskType, column_levels, count_levels, is_categorical_column


def partition_categorical_columns(
    data: pd.DataFrame,
    boundary: Union[int, float],
    columns: Optional[Sequence[str]] = None,
) -> Tuple[List[str], List[str]]:
    """
    Split categorical columns into impact-encoded and dummy-encoded ones.

    Args:
        data: Feature data
        boundary: Columns with more levels than this are impact encoded
        columns: Restrict the partition to these columns (default: all)

    Returns:
        (impact_cols, dummy_cols), disjoint, in column order, covering every
        categorical column
    """

    candidates = list(data.columns) if columns is None else list(columns)
    categorical = [col for col in candidates if is_categorical_column(data[col])]

    impact_cols = [col for col in categorical if count_levels(data[col]) > boundary]
    dummy_cols = [col for col in categorical if col not in impact_cols]

    return impact_cols, dummy_cols


class DummyEncoder(BaseEstimator, TransformerMixin):
    """
    One-hot encoding of selected factor columns.

    Each fitted level becomes a 0/1 column named ``"<col>.<level>"``. Missing
    values produce NaN in all of a column's dummies, unseen levels zeros.
    """

    def __init__(self, cols: Optional[List[str]] = None):
        self.cols = cols

    def fit(self, X: pd.DataFrame, y: Any = None) -> "DummyEncoder":
        cols = list(self.cols or [])
        missing = [col for col in cols if col not in X.columns]
        if missing:
            raise InvalidArgumentError(f"Columns not found for dummy encoding: {missing}")

        self.levels_: Dict[str, List[Any]] = {col: column_levels(X[col]) for col in cols}
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if not hasattr(self, "levels_"):
            raise ModelNotFittedError("DummyEncoder is not fitted. Call fit() first.")

        X = X.copy()
        for col, levels in self.levels_.items():
            values = X[col].astype(object)
            is_missing = values.isna().to_numpy()
            dummies = {}
            for level in levels:
                matches = (values == level).to_numpy(dtype=float)
                dummies[f"{col}.{level}"] = np.where(is_missing, np.nan, matches)
            position = X.columns.get_loc(col)
            X = X.drop(columns=col)
            for offset, (name, dummy) in enumerate(dummies.items()):
                X.insert(position + offset, name, dummy)
        return X


class ImpactEncoder(BaseEstimator, TransformerMixin):
    """
    Impact (target) encoding of selected factor columns.

    Every level is replaced by a statistic of the target, shrunk towards the
    overall value by ``smoothing`` pseudo observations::

        (n_level * stat_level + smoothing * prior) / (n_level + smoothing)

    - Regression: statistic is the target mean
    - Binary classification: probability of the positive (last) class
    - Multiclass: one column ``"<col>.<class>"`` per class probability

    Args:
        cols: Columns to encode
        smoothing: Weight of the prior in pseudo observations
        task_type: Classification or regression
        classes: Class levels (classification only), positive class last
    """

    def __init__(
        self,
        cols: Optional[List[str]] = None,
        smoothing: float = 1.0,
        task_type: TaskType = TaskType.REGRESSION,
        classes: Optional[List[Any]] = None,
    ):
        self.cols = cols
        self.smoothing = smoothing
        self.task_type = task_type
        self.classes = classes

    def _target_matrix(self, y: Any) -> Tuple[np.ndarray, List[str]]:
        """Numeric target columns the statistics are computed on."""
        y = np.asarray(y)
        if self.task_type == TaskType.REGRESSION:
            return y.astype(float).reshape(-1, 1), [""]
        if self.task_type != TaskType.CLASSIFICATION:
            raise InvalidArgumentError(
                f"Impact encoding does not support {TaskType(self.task_type).value} tasks"
            )

        classes = list(self.classes) if self.classes is not None else column_levels(pd.Series(y))
        if len(classes) == 2:
            return (y == classes[-1]).astype(float).reshape(-1, 1), [""]
        matrix = np.column_stack([(y == cls).astype(float) for cls in classes])
        return matrix, [f".{cls}" for cls in classes]

    def fit(self, X: pd.DataFrame, y: Any = None) -> "ImpactEncoder":
        if y is None:
            raise InvalidArgumentError("ImpactEncoder needs the target to fit")
        if self.smoothing < 0:
            raise InvalidArgumentError(f"smoothing must be >= 0, got {self.smoothing}")

        cols = list(self.cols or [])
        missing = [col for col in cols if col not in X.columns]
        if missing:
            raise InvalidArgumentError(f"Columns not found for impact encoding: {missing}")

        target, suffixes = self._target_matrix(y)
        self.suffixes_ = suffixes
        self.prior_ = target.mean(axis=0)
        self.mappings_: Dict[str, pd.DataFrame] = {}

        for col in cols:
            keys = X[col].astype(object).to_numpy()
            frame = pd.DataFrame(target, columns=range(target.shape[1]))
            frame["__level__"] = keys
            grouped = frame.dropna(subset=["__level__"]).groupby("__level__")
            sums = grouped.sum()
            counts = grouped.size().to_numpy().reshape(-1, 1)
            encoded = (sums.to_numpy() + self.smoothing * self.prior_) / (counts + self.smoothing)
            self.mappings_[col] = pd.DataFrame(encoded, index=sums.index)

        logger.debug(f"🔧 Impact encoding fitted for {len(cols)} column(s)")

        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if not hasattr(self, "mappings_"):
            raise ModelNotFittedError("ImpactEncoder is not fitted. Call fit() first.")

        X = X.copy()
        for col, mapping in self.mappings_.items():
            keys = X[col].astype(object)
            position = X.columns.get_loc(col)
            X = X.drop(columns=col)
            for j, suffix in enumerate(self.suffixes_):
                values = keys.map(mapping[j]).astype(float)
                values = values.fillna(self.prior_[j]).to_numpy()
                X.insert(position + j, f"{col}{suffix}", values)
        return X
