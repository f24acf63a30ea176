"""
Decision Threshold Tuning
=========================

Finds the classification threshold(s) that optimize a measure on a
probabilistic prediction.

- Binary: threshold of the positive class, searched with bounded scalar
  optimization on 20 equally sized sub-intervals of [0, 1]
- Multiclass: one threshold per class, searched with differential
  evolution and normalized to sum to 1
"""

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from loguru import logger
from scipy.optimize import differential_evolution, minimize_scalar

from ..exceptions import InvalidArgumentError
from ..measures import Measure
from ..prediction import Prediction

N_SUBINTERVALS = 20


def _score(pred: Prediction, measure: Measure, threshold: Any) -> float:
    perf = measure.evaluate(pred.set_threshold(threshold))
    return perf if measure.minimize else -perf


def _tune_binary(pred: Prediction, measure: Measure) -> Tuple[float, float]:
    edges = np.linspace(0.0, 1.0, N_SUBINTERVALS + 1)
    best_t, best_score = 0.5, _score(pred, measure, 0.5)

    for lower, upper in zip(edges[:-1], edges[1:]):
        res = minimize_scalar(
            lambda t: _score(pred, measure, float(t)),
            bounds=(lower, upper),
            method="bounded",
        )
        if res.fun < best_score:
            best_t, best_score = float(res.x), float(res.fun)

    return best_t, best_score


def _tune_multiclass(
    pred: Prediction,
    measure: Measure,
    random_state: Optional[int],
) -> Tuple[Dict[Any, float], float]:
    classes = list(pred.classes)
    worst = measure.worst if measure.minimize else -measure.worst

    def normalize(x: np.ndarray) -> Optional[Dict[Any, float]]:
        total = float(np.sum(x))
        if total <= 0:
            return None
        return {cls: float(v) / total for cls, v in zip(classes, x)}

    def fn(x: np.ndarray) -> float:
        th = normalize(x)
        if th is None:
            return float(np.nan_to_num(worst, posinf=np.finfo(float).max, neginf=-np.finfo(float).max))
        return _score(pred, measure, th)

    res = differential_evolution(
        fn,
        bounds=[(0.0, 1.0)] * len(classes),
        x0=np.full(len(classes), 1.0 / len(classes)),
        seed=random_state,
        maxiter=100,
        polish=False,
    )
    th = normalize(res.x) or {cls: 1.0 / len(classes) for cls in classes}

    return th, _score(pred, measure, th)


def tune_threshold(
    pred: Prediction,
    measure: Measure,
    random_state: Optional[int] = None,
) -> Tuple[Union[float, Dict[Any, float]], float]:
    """
    Tune the decision threshold of a classification prediction.

    Args:
        pred: Prediction with class probabilities
        measure: Measure to optimize
        random_state: Seed of the multiclass search

    Returns:
        (threshold, performance) where threshold is a float for binary tasks
        and a {class: threshold} dict for multiclass tasks
    """
    if not pred.has_proba or pred.classes is None:
        raise InvalidArgumentError("Threshold tuning needs a probabilistic classification prediction")

    if len(pred.classes) == 2:
        threshold, score = _tune_binary(pred, measure)
    else:
        threshold, score = _tune_multiclass(pred, measure, random_state)

    perf = score if measure.minimize else -score
    logger.debug(f"🎚️ Tuned threshold {threshold} with {measure.name} = {perf:.6f}")

    return threshold, perf
