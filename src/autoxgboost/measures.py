"""
Performance Measures
====================

Measures score a ``Prediction``. Each knows whether it is minimized, which
task types it applies to and whether it needs class probabilities.

Classification: mmce (default), acc, ber, f1, auc, brier, logloss
Regression:     mse (default), rmse, mae, medae, rsq
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple, Union

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    f1_score,
    log_loss,
    mean_absolute_error,
    mean_squared_error,
    median_absolute_error,
    r2_score,
    roc_auc_score,
)

from .exceptions import InvalidArgumentError
from .prediction import Prediction
from .tasks import Task, TaskType


@dataclass(frozen=True)
class Measure:
    """Performance measure"""

    name: str
    fn: Callable[[Prediction], float]
    minimize: bool
    task_types: Tuple[TaskType, ...]
    requires_proba: bool = False
    binary_only: bool = False
    best: float = 0.0
    worst: float = np.inf
    note: str = ""

    @property
    def properties(self) -> List[str]:
        props = [t.value for t in self.task_types]
        if self.requires_proba:
            props.append("req.prob")
        if self.binary_only:
            props.append("binary")
        return props

    def check_task(self, task: Task) -> None:
        """Raise if the measure cannot score predictions for this task."""
        if task.task_type not in self.task_types:
            raise InvalidArgumentError(
                f"Measure '{self.name}' does not support {task.task_type.value} tasks"
            )
        if self.binary_only and not task.is_binary:
            raise InvalidArgumentError(f"Measure '{self.name}' requires a binary task")

    def evaluate(self, pred: Prediction) -> float:
        if self.requires_proba and not pred.has_proba:
            raise InvalidArgumentError(f"Measure '{self.name}' requires probabilities")
        return float(self.fn(pred))

    def __repr__(self) -> str:
        return f"Measure({self.name}, minimize={self.minimize})"


def _positive_truth(pred: Prediction) -> np.ndarray:
    return (pred.truth == pred.positive).astype(int)


def _mmce(pred: Prediction) -> float:
    return 1.0 - accuracy_score(pred.truth, pred.response)


def _acc(pred: Prediction) -> float:
    return accuracy_score(pred.truth, pred.response)


def _ber(pred: Prediction) -> float:
    return 1.0 - balanced_accuracy_score(pred.truth, pred.response)


def _f1(pred: Prediction) -> float:
    return f1_score(
        _positive_truth(pred),
        (pred.response == pred.positive).astype(int),
        zero_division=0,
    )


def _auc(pred: Prediction) -> float:
    truth = _positive_truth(pred)
    if truth.min() == truth.max():
        return np.nan
    return roc_auc_score(truth, pred.positive_proba)


def _brier(pred: Prediction) -> float:
    return float(np.mean((pred.positive_proba - _positive_truth(pred)) ** 2))


def _logloss(pred: Prediction) -> float:
    return log_loss(list(pred.truth), pred.proba, labels=list(pred.classes))


def _mse(pred: Prediction) -> float:
    return mean_squared_error(pred.truth, pred.response)


def _rmse(pred: Prediction) -> float:
    return float(np.sqrt(mean_squared_error(pred.truth, pred.response)))


def _mae(pred: Prediction) -> float:
    return mean_absolute_error(pred.truth, pred.response)


def _medae(pred: Prediction) -> float:
    return median_absolute_error(pred.truth, pred.response)


def _rsq(pred: Prediction) -> float:
    return r2_score(pred.truth, pred.response)


_CLASSIF = (TaskType.CLASSIFICATION,)
_REGR = (TaskType.REGRESSION,)

MEASURES: Dict[str, Measure] = {
    m.name: m
    for m in [
        Measure("mmce", _mmce, True, _CLASSIF, best=0.0, worst=1.0,
                note="Mean misclassification error"),
        Measure("acc", _acc, False, _CLASSIF, best=1.0, worst=0.0, note="Accuracy"),
        Measure("ber", _ber, True, _CLASSIF, best=0.0, worst=1.0,
                note="Balanced error rate"),
        Measure("f1", _f1, False, _CLASSIF, binary_only=True, best=1.0, worst=0.0,
                note="F1 score of the positive class"),
        Measure("auc", _auc, False, _CLASSIF, requires_proba=True, binary_only=True,
                best=1.0, worst=0.0, note="Area under the ROC curve"),
        Measure("brier", _brier, True, _CLASSIF, requires_proba=True, binary_only=True,
                best=0.0, worst=1.0, note="Brier score"),
        Measure("logloss", _logloss, True, _CLASSIF, requires_proba=True,
                note="Logarithmic loss"),
        Measure("mse", _mse, True, _REGR, note="Mean squared error"),
        Measure("rmse", _rmse, True, _REGR, note="Root mean squared error"),
        Measure("mae", _mae, True, _REGR, note="Mean absolute error"),
        Measure("medae", _medae, True, _REGR, note="Median absolute error"),
        Measure("rsq", _rsq, False, _REGR, best=1.0, worst=-np.inf,
                note="Coefficient of determination"),
    ]
}

DEFAULT_MEASURES: Dict[TaskType, str] = {
    TaskType.CLASSIFICATION: "mmce",
    TaskType.REGRESSION: "mse",
}


def get_measure(measure: Union[str, Measure]) -> Measure:
    """Look up a measure by name; measures pass through unchanged."""
    if isinstance(measure, Measure):
        return measure
    if not isinstance(measure, str):
        raise InvalidArgumentError(
            f"measure must be a Measure or a measure name, got {type(measure).__name__}"
        )
    try:
        return MEASURES[measure]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown measure '{measure}'. Available: {sorted(MEASURES)}"
        ) from None


def default_measure(task: Task) -> Measure:
    """mmce for classification, mse for regression"""
    if task.task_type not in DEFAULT_MEASURES:
        raise InvalidArgumentError(f"No default measure for {task.task_type.value} tasks")
    return MEASURES[DEFAULT_MEASURES[task.task_type]]
