"""
Hyperparameter Tuning Module
============================

Model-based optimization of XGBoost hyperparameters with holdout early
stopping.

Key Components:
--------------
- autoxgboost / AutoXGBoostTuner: End-to-end tuning of a task
- mbo: Sequential model-based optimization (scikit-optimize or Optuna)
- ParameterSpace and the default search spaces
- tune_threshold: Decision threshold optimization
"""

from .control import AcquisitionFunction, MBOControl, TuningStrategy
from .param_sets import (
    DiscreteParam,
    IntegerParam,
    NumericParam,
    ParameterSpace,
    autoxgb_param_set,
    generate_design,
    impact_encoding_param_set,
    pow2,
    scale_pos_weight_param_set,
)
from .mbo import MBOResult, ObjectiveValue, mbo
from .threshold import tune_threshold
from .objective import HoldoutObjective
from .final_learner import build_final_learner
from .hyperparameter_tuner import AutoXGBoostTuner, AutoxgbResult, autoxgboost

__all__ = [
    # Control
    "AcquisitionFunction",
    "MBOControl",
    "TuningStrategy",

    # Parameter spaces
    "DiscreteParam",
    "IntegerParam",
    "NumericParam",
    "ParameterSpace",
    "autoxgb_param_set",
    "generate_design",
    "impact_encoding_param_set",
    "pow2",
    "scale_pos_weight_param_set",

    # Optimization
    "MBOResult",
    "ObjectiveValue",
    "mbo",
    "tune_threshold",
    "HoldoutObjective",
    "build_final_learner",

    # Tuner
    "AutoXGBoostTuner",
    "AutoxgbResult",
    "autoxgboost",
]
