"""
Holdout Objective
=================

The function handed to the optimizer: train one configuration with early
stopping and score it on the early-stopping rows.
"""

from typing import Any, Dict, Optional, Sequence

import numpy as np
from loguru import logger
from sklearn.pipeline import Pipeline

from ..measures import Measure
from ..models import get_best_iteration, predict_task, set_hyper_pars
from ..tasks import Task, TaskType
from .mbo import ObjectiveValue
from .threshold import tune_threshold


class HoldoutObjective:
    """
    Noisy objective over transformed hyperparameters.

    The base learner holds out ``early_stopping_index`` itself, so it is
    trained on the whole task; predictions are made for the held-out rows.
    The extras carry the winning number of boosting rounds and, when
    thresholds are tuned, the tuned threshold.

    Args:
        base_learner: Unfitted pipeline ending in an early-stopping learner
        task: Task to train on
        measure: Measure to optimize
        early_stopping_index: Positions of the early-stopping rows
        predict_type: "response" or "prob"
        tune_threshold: Tune thresholds of classification predictions
        random_state: Seed of the multiclass threshold search
    """

    def __init__(
        self,
        base_learner: Pipeline,
        task: Task,
        measure: Measure,
        early_stopping_index: Sequence[int],
        predict_type: str = "response",
        tune_threshold: bool = True,
        random_state: Optional[int] = None,
    ):
        self.base_learner = base_learner
        self.task = task
        self.measure = measure
        self.early_stopping_index = np.asarray(early_stopping_index, dtype=int)
        self.predict_type = predict_type
        self.tune_threshold = tune_threshold
        self.random_state = random_state
        self.n_calls = 0

    @property
    def minimize(self) -> bool:
        return self.measure.minimize

    def __call__(self, x: Dict[str, Any]) -> ObjectiveValue:
        self.n_calls += 1
        learner = set_hyper_pars(self.base_learner, x)
        learner.fit(self.task.features, self.task.y)

        X_test = self.task.features.iloc[self.early_stopping_index]
        y_test = self.task.y.iloc[self.early_stopping_index]
        pred = predict_task(learner, X_test, y_test, self.task, self.predict_type)
        nrounds = get_best_iteration(learner)

        if self.tune_threshold and self.task.task_type == TaskType.CLASSIFICATION:
            threshold, perf = tune_threshold(pred, self.measure, random_state=self.random_state)
            extras = {"nrounds": nrounds, "threshold": threshold}
        else:
            perf = self.measure.evaluate(pred)
            extras = {"nrounds": nrounds}

        logger.debug(f"🎯 {self.measure.name} = {perf:.6f} with {nrounds} round(s)")
        return ObjectiveValue(y=perf, extras=extras)
