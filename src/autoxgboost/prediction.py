"""
Predictions on the Early-Stopping Set
=====================================

A ``Prediction`` keeps the truth next to the predicted response and, for
probabilistic classification, the class probabilities. Thresholds turn the
probabilities into a response: the predicted class is the one with the largest
``probability / threshold``.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from .exceptions import InvalidArgumentError
from .tasks import TaskType

Threshold = Union[float, Dict[Any, float]]


def threshold_vector(threshold: Threshold, classes: Sequence[Any]) -> np.ndarray:
    """
    Per-class threshold vector in the order of ``classes``.

    A scalar is the threshold of the positive (last) class of a binary task
    and expands to ``[1 - t, t]``.
    """
    if isinstance(threshold, dict):
        missing = [cls for cls in classes if cls not in threshold]
        if missing:
            raise InvalidArgumentError(f"Threshold is missing classes: {missing}")
        return np.array([float(threshold[cls]) for cls in classes])
    if len(classes) != 2:
        raise InvalidArgumentError("A scalar threshold requires a binary task")
    t = float(threshold)
    return np.array([1.0 - t, t])


def apply_threshold(
    proba: np.ndarray,
    classes: Sequence[Any],
    threshold: Optional[Threshold] = None,
) -> np.ndarray:
    """Class labels from a probability matrix and optional thresholds."""
    proba = np.asarray(proba, dtype=float)
    if threshold is None:
        scores = proba
    else:
        with np.errstate(divide="ignore", invalid="ignore"):
            scores = proba / threshold_vector(threshold, classes)
        scores = np.nan_to_num(scores, nan=0.0, posinf=np.finfo(float).max)
    return np.asarray(classes, dtype=object)[np.argmax(scores, axis=1)]


@dataclass
class Prediction:
    """Predicted response (and probabilities) next to the truth"""

    truth: np.ndarray
    response: np.ndarray
    task_type: TaskType
    proba: Optional[np.ndarray] = None
    classes: Optional[List[Any]] = None
    threshold: Optional[Threshold] = None

    def __post_init__(self):
        self.truth = np.asarray(self.truth)
        self.response = np.asarray(self.response)
        if self.proba is not None:
            self.proba = np.asarray(self.proba, dtype=float)

    @property
    def has_proba(self) -> bool:
        return self.proba is not None

    @property
    def positive(self) -> Any:
        if self.classes is None or len(self.classes) != 2:
            raise InvalidArgumentError("positive class is only defined for binary predictions")
        return self.classes[-1]

    @property
    def positive_proba(self) -> np.ndarray:
        if self.proba is None:
            raise InvalidArgumentError("Prediction has no probabilities")
        return self.proba[:, -1]

    def set_threshold(self, threshold: Threshold) -> "Prediction":
        """New prediction whose response is recomputed from the thresholds."""
        if self.proba is None or self.classes is None:
            raise InvalidArgumentError("Thresholds need a probabilistic classification prediction")
        response = apply_threshold(self.proba, self.classes, threshold)
        return replace(self, response=response, threshold=threshold)

    def __len__(self) -> int:
        return len(self.truth)
