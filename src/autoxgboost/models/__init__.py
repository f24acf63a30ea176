"""
Core XGBoost Models Module
==========================

XGBoost learners with holdout early stopping and the pipelines that put
categorical encoders in front of them.

Models:
-------
- XGBoostClassifierLearner: Binary and multiclass classification
- XGBoostRegressorLearner: Regression

Pipelines:
----------
- build_base_learner: Learner wrapped with impact/dummy encoders
- set_hyper_pars: Route tuned hyperparameters to the right step
- predict_task: Prediction of a fitted pipeline on labelled rows
"""

from .xgb_learner import (
    BaseXGBoostLearner,
    Objective,
    XGBoostClassifierLearner,
    XGBoostRegressorLearner,
)

from .pipeline import (
    IMPACT_ENCODER_PARAMS,
    build_base_learner,
    get_best_iteration,
    get_learner,
    predict_task,
    set_hyper_pars,
)

__all__ = [
    # Learners
    "BaseXGBoostLearner",
    "Objective",
    "XGBoostClassifierLearner",
    "XGBoostRegressorLearner",

    # Pipelines
    "IMPACT_ENCODER_PARAMS",
    "build_base_learner",
    "get_best_iteration",
    "get_learner",
    "predict_task",
    "set_hyper_pars",
]
