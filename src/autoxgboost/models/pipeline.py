"""
Learner Pipelines
=================

A learner is wrapped with the categorical encoders it needs into a
scikit-learn ``Pipeline``: impact encoding first, dummy encoding second, the
XGBoost learner last. Encoders are fitted on all rows passed to ``fit``; the
learner itself holds out its early-stopping rows.
"""

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.pipeline import Pipeline

from ..exceptions import InvalidArgumentError
from ..features import DummyEncoder, ImpactEncoder
from ..prediction import Prediction, apply_threshold
from ..tasks import Task, TaskType
from .xgb_learner import BaseXGBoostLearner

# Hyperparameters that belong to the impact encoder, by parameter-space name
IMPACT_ENCODER_PARAMS: Dict[str, str] = {"impact_smoothing": "smoothing"}

LEARNER_STEP = "learner"


def build_base_learner(
    learner: BaseXGBoostLearner,
    task: Task,
    dummy_cols: Optional[List[str]] = None,
    impact_cols: Optional[List[str]] = None,
) -> Pipeline:
    """
    Wrap a learner with dummy and impact encoders for the given columns.

    Steps are only added for non-empty column lists.
    """

    steps = []
    if impact_cols:
        steps.append((
            "impact",
            ImpactEncoder(
                cols=list(impact_cols),
                task_type=task.task_type,
                classes=list(task.class_levels) or None,
            ),
        ))
    if dummy_cols:
        steps.append(("dummy", DummyEncoder(cols=list(dummy_cols))))
    steps.append((LEARNER_STEP, learner))

    return Pipeline(steps)


def set_hyper_pars(pipeline: Pipeline, params: Dict[str, Any]) -> Pipeline:
    """Unfitted copy of the pipeline with hyperparameters routed to their step."""
    learner = clone(pipeline)
    routed = {}
    for name, value in params.items():
        if name in IMPACT_ENCODER_PARAMS:
            if "impact" not in learner.named_steps:
                raise InvalidArgumentError(
                    f"Parameter '{name}' needs impact encoded columns"
                )
            routed[f"impact__{IMPACT_ENCODER_PARAMS[name]}"] = value
        else:
            routed[f"{LEARNER_STEP}__{name}"] = value
    learner.set_params(**routed)
    return learner


def get_learner(pipeline: Pipeline) -> BaseXGBoostLearner:
    return pipeline.named_steps[LEARNER_STEP]


def get_best_iteration(pipeline: Pipeline) -> int:
    """Winning number of boosting rounds of a fitted pipeline"""
    return get_learner(pipeline).best_iteration_


def predict_task(
    pipeline: Pipeline,
    X: pd.DataFrame,
    y: Any,
    task: Task,
    predict_type: str = "response",
) -> Prediction:
    """Predict ``X`` and pair the result with the truth ``y``."""

    truth = np.asarray(y)
    if task.task_type == TaskType.REGRESSION:
        return Prediction(truth=truth, response=pipeline.predict(X), task_type=task.task_type)

    learner = get_learner(pipeline)
    proba = pipeline.predict_proba(X)
    classes = list(learner.classes_)
    response = apply_threshold(proba, classes, learner.threshold)

    return Prediction(
        truth=truth,
        response=response,
        task_type=task.task_type,
        proba=proba if predict_type == "prob" else None,
        classes=classes,
        threshold=learner.threshold,
    )
