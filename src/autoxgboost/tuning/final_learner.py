"""
Final Learner Assembly
======================

Turns the optimization result into a plain learner: the winning number of
boosting rounds instead of early stopping, the transformed winning
hyperparameters, the tuned threshold and the same categorical encoders
that were used during tuning.
"""

from typing import List, Optional

from loguru import logger
from sklearn.pipeline import Pipeline

from ..models import (
    XGBoostClassifierLearner,
    XGBoostRegressorLearner,
    build_base_learner,
    set_hyper_pars,
)
from ..tasks import Task, TaskType
from .mbo import MBOResult
from .param_sets import ParameterSpace


def build_final_learner(
    optim_result: MBOResult,
    objective: str,
    predict_type: Optional[str],
    par_set: ParameterSpace,
    dummy_cols: Optional[List[str]],
    impact_cols: Optional[List[str]],
    task: Task,
    nthread: Optional[int] = None,
    random_state: Optional[int] = None,
) -> Pipeline:
    """
    Build the unfitted final learner from an optimization result.

    Args:
        optim_result: Result of ``mbo``
        objective: XGBoost objective used during tuning
        predict_type: "response" or "prob" for classification, None for regression
        par_set: Space the result was optimized over
        dummy_cols: Dummy encoded columns
        impact_cols: Impact encoded columns
        task: Task the learner is meant for
        nthread: Threads used by xgboost
        random_state: Seed of the booster

    Returns:
        Pipeline with the encoders and the final learner
    """
    nrounds = int(optim_result.extras["nrounds"])
    pars = {k: v for k, v in par_set.trafo(optim_result.x).items() if v is not None}

    if task.task_type == TaskType.CLASSIFICATION:
        learner = XGBoostClassifierLearner(
            objective=objective,
            nrounds=nrounds,
            nthread=nthread,
            random_state=random_state,
            classes=list(task.class_levels),
            predict_type=predict_type or "response",
            threshold=optim_result.extras.get("threshold"),
        )
    else:
        learner = XGBoostRegressorLearner(
            objective=objective,
            nrounds=nrounds,
            nthread=nthread,
            random_state=random_state,
        )

    pipeline = build_base_learner(learner, task, dummy_cols=dummy_cols, impact_cols=impact_cols)
    pipeline = set_hyper_pars(pipeline, pars)

    logger.info(f"🏁 Final learner with {nrounds} round(s) and {len(pars)} tuned parameter(s)")
    return pipeline
