"""
Automatic XGBoost Tuning
========================

Entry point of the package. ``autoxgboost`` tunes an XGBoost learner for a
classification or regression task with model-based optimization:

1. validate the arguments and pick the default measure and search space
2. split off the early-stopping rows
3. build the early-stopping learner for the task type and wrap it with
   impact/dummy encoders chosen by column cardinality
4. optimize the holdout objective starting from a Latin hypercube design
5. assemble the final learner from the best configuration and optionally
   train it on the whole task

Author: autoxgboost contributors
Version: 1.0.0
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd
from loguru import logger
from rich.console import Console
from rich.table import Table
from sklearn.pipeline import Pipeline

from ..config import AutoXGBoostSettings
from ..exceptions import InvalidArgumentError, ModelNotFittedError, UnsupportedTaskError
from ..features import partition_categorical_columns
from ..measures import Measure, default_measure, get_measure
from ..models import (
    Objective,
    XGBoostClassifierLearner,
    XGBoostRegressorLearner,
    build_base_learner,
)
from ..prediction import Threshold
from ..tasks import Task, TaskType
from ..validation import make_holdout_split
from .control import MBOControl
from .final_learner import build_final_learner
from .mbo import MBOResult, mbo
from .objective import HoldoutObjective
from .param_sets import (
    ParameterSpace,
    autoxgb_param_set,
    generate_design,
    impact_encoding_param_set,
    scale_pos_weight_param_set,
)

SUPPORTED_TASK_TYPES = (TaskType.CLASSIFICATION, TaskType.REGRESSION)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    return value


@dataclass
class AutoxgbResult:
    """Result of ``autoxgboost``"""

    optim_result: MBOResult
    final_learner: Pipeline
    final_model: Optional[Pipeline]
    measure: Measure
    task_type: TaskType
    settings: Optional[AutoXGBoostSettings] = None
    tuning_time: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def best_params(self) -> Dict[str, Any]:
        """Transformed hyperparameters of the best configuration"""
        return dict(self.optim_result.x_trafo)

    @property
    def nrounds(self) -> int:
        return int(self.optim_result.extras["nrounds"])

    @property
    def threshold(self) -> Optional[Threshold]:
        return self.optim_result.extras.get("threshold")

    @property
    def best_score(self) -> float:
        return self.optim_result.y

    def _check_model(self) -> Pipeline:
        if self.final_model is None:
            raise ModelNotFittedError(
                "No final model was built. Use build_final_model=True or fit final_learner."
            )
        return self.final_model

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Predict with the final model"""
        return self._check_model().predict(X)

    def predict_proba(self, X: pd.DataFrame) -> np.ndarray:
        """Class probabilities of the final model (classification only)"""
        if self.task_type != TaskType.CLASSIFICATION:
            raise InvalidArgumentError("predict_proba is only available for classification")
        return self._check_model().predict_proba(X)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON serializable dictionary"""
        return {
            "task_type": self.task_type.value,
            "measure": self.measure.name,
            "best_params": _jsonable(self.best_params),
            "nrounds": self.nrounds,
            "threshold": _jsonable(self.threshold),
            "best_score": self.best_score,
            "n_evals": self.optim_result.n_evals,
            "final_state": self.optim_result.final_state,
            "tuning_time": self.tuning_time,
            "has_final_model": self.final_model is not None,
            "settings": self.settings.to_dict() if self.settings is not None else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def summary(self) -> str:
        lines = ["Autoxgboost tuning result", "", "Recommended parameters:"]
        for name, value in self.best_params.items():
            lines.append(f"  {name}: {value:.6g}" if isinstance(value, float) else f"  {name}: {value}")
        lines.append(f"  nrounds: {self.nrounds}")
        if self.threshold is not None:
            lines.append(f"  threshold: {self.threshold}")
        lines += [
            "",
            f"With tuning result: {self.measure.name} = {self.best_score:.6f}",
            f"Evaluations: {self.optim_result.n_evals} ({self.optim_result.final_state})",
        ]
        return "\n".join(lines)

    def display(self, console: Optional[Console] = None):
        """Render the result as a rich table"""
        console = console or Console()

        table = Table(title="🎯 AUTOXGBOOST TUNING RESULT")
        table.add_column("Parameter", style="cyan")
        table.add_column("Value", style="green")

        for name, value in self.best_params.items():
            table.add_row(name, f"{value:.6g}" if isinstance(value, float) else str(value))
        table.add_row("nrounds", str(self.nrounds))
        if self.threshold is not None:
            table.add_row("threshold", str(_jsonable(self.threshold)))
        table.add_row(self.measure.name, f"{self.best_score:.6f}")
        table.add_row("Evaluations", str(self.optim_result.n_evals))
        table.add_row("Tuning time", f"{self.tuning_time:.2f}s")

        console.print(table)

    def __str__(self) -> str:
        return self.summary()


class AutoXGBoostTuner:
    """
    Tuner behind ``autoxgboost``.

    Args:
        measure: Measure to optimize; mmce for classification, mse for regression by default
        control: Termination and optimizer settings; 160 iterations or one hour by default
        par_set: Search space; ``autoxgb_param_set()`` by default
        mbo_learner: Surrogate model of the optimizer
        **settings: Arguments validated by ``AutoXGBoostSettings``
    """

    def __init__(
        self,
        measure: Optional[Union[str, Measure]] = None,
        control: Optional[MBOControl] = None,
        par_set: Optional[ParameterSpace] = None,
        mbo_learner: Any = None,
        **settings: Any,
    ):
        self.settings = AutoXGBoostSettings.from_kwargs(**settings)
        if control is not None and not isinstance(control, MBOControl):
            raise InvalidArgumentError(f"control must be an MBOControl, got {type(control).__name__}")
        if par_set is not None and not isinstance(par_set, ParameterSpace):
            raise InvalidArgumentError(f"par_set must be a ParameterSpace, got {type(par_set).__name__}")
        self.measure = measure
        self.control = control
        self.par_set = par_set
        self.mbo_learner = mbo_learner

    def _resolve_measure(self, task: Task) -> Measure:
        measure = default_measure(task) if self.measure is None else get_measure(self.measure)
        measure.check_task(task)
        return measure

    def _base_learner(self, task: Task, early_stopping_index: np.ndarray, predict_type: Optional[str]):
        s = self.settings
        common = dict(
            nrounds=s.max_nrounds,
            early_stopping_rounds=s.early_stopping_rounds,
            early_stopping_index=early_stopping_index,
            nthread=s.nthread,
            random_state=self.control.random_state,
        )
        if task.task_type == TaskType.CLASSIFICATION:
            if task.is_binary:
                objective, eval_metric = Objective.LOGISTIC.value, "error"
            else:
                objective, eval_metric = Objective.MULTIPROB.value, "merror"
            learner = XGBoostClassifierLearner(
                objective=objective,
                eval_metric=eval_metric,
                classes=list(task.class_levels),
                predict_type=predict_type,
                **common,
            )
        else:
            objective = Objective.SQUARED_ERROR.value
            learner = XGBoostRegressorLearner(objective=objective, eval_metric="rmse", **common)
        return learner, objective

    def fit(self, task: Task) -> AutoxgbResult:
        """Tune on ``task``"""
        if not isinstance(task, Task):
            raise InvalidArgumentError(f"task must be a Task, got {type(task).__name__}")
        if task.task_type not in SUPPORTED_TASK_TYPES:
            raise UnsupportedTaskError(
                f"Task must be regression or classification, got {task.task_type.value}"
            )

        start = datetime.now()
        s = self.settings
        measure = self._resolve_measure(task)
        self.control = self.control or MBOControl()
        par_set = self.par_set or autoxgb_param_set()

        logger.info(f"🚀 Tuning XGBoost on {task!r} for {measure.name}")

        _, early_stopping_index = make_holdout_split(
            task, split=s.early_stopping_fraction, random_state=self.control.random_state
        )

        predict_type = None
        if task.task_type == TaskType.CLASSIFICATION:
            predict_type = "prob" if measure.requires_proba or s.tune_threshold else "response"
            if task.is_binary:
                par_set = par_set + scale_pos_weight_param_set()

        learner, objective = self._base_learner(task, early_stopping_index, predict_type)

        impact_cols: List[str] = []
        dummy_cols: List[str] = []
        if task.has_categorical_features:
            impact_cols, dummy_cols = partition_categorical_columns(
                task.features, s.impact_encoding_boundary
            )
            logger.info(f"🔤 Impact encoding {impact_cols}, dummy encoding {dummy_cols}")
            if impact_cols:
                par_set = par_set + impact_encoding_param_set()

        base_learner = build_base_learner(learner, task, dummy_cols=dummy_cols, impact_cols=impact_cols)

        obj = HoldoutObjective(
            base_learner,
            task,
            measure,
            early_stopping_index,
            predict_type=predict_type or "response",
            tune_threshold=s.tune_threshold,
            random_state=self.control.random_state,
        )
        design = generate_design(s.design_size, par_set, random_state=self.control.random_state)

        optim_result = mbo(
            obj, par_set, control=self.control, design=design,
            learner=self.mbo_learner, minimize=measure.minimize,
        )

        final_learner = build_final_learner(
            optim_result, objective, predict_type, par_set=par_set,
            dummy_cols=dummy_cols, impact_cols=impact_cols, task=task,
            nthread=s.nthread, random_state=self.control.random_state,
        )

        final_model = None
        if s.build_final_model:
            final_model = final_learner.fit(task.features, task.y)
            logger.info("✅ Final model trained on the whole task")

        result = AutoxgbResult(
            optim_result=optim_result,
            final_learner=final_learner,
            final_model=final_model,
            measure=measure,
            task_type=task.task_type,
            settings=s,
            tuning_time=(datetime.now() - start).total_seconds(),
        )
        if self.control.show_progress:
            result.display()

        return result


def autoxgboost(
    task: Task,
    measure: Optional[Union[str, Measure]] = None,
    control: Optional[MBOControl] = None,
    par_set: Optional[ParameterSpace] = None,
    max_nrounds: int = 10 ** 6,
    early_stopping_rounds: int = 10,
    early_stopping_fraction: float = 4 / 5,
    build_final_model: bool = True,
    design_size: int = 15,
    impact_encoding_boundary: Union[int, float] = 10,
    mbo_learner: Any = None,
    nthread: Optional[int] = None,
    tune_threshold: bool = True,
) -> AutoxgbResult:
    """
    Automatically tune XGBoost for a classification or regression task.

    Args:
        task: Task to tune on
        measure: Measure to optimize; mmce for classification, mse for regression by default
        control: Termination and optimizer settings; 160 iterations or 3600 seconds by default
        par_set: Search space; ``autoxgb_param_set()`` by default
        max_nrounds: Upper bound of boosting rounds
        early_stopping_rounds: Rounds without improvement before stopping
        early_stopping_fraction: Share of rows used for training, the rest decides early stopping
        build_final_model: Train the final learner on the whole task
        design_size: Size of the initial design
        impact_encoding_boundary: Categorical columns with more levels are impact encoded,
            the rest dummy encoded; ``float("inf")`` dummy encodes everything
        mbo_learner: Surrogate model of the optimizer
        nthread: Threads used by xgboost
        tune_threshold: Tune the decision threshold (classification only)

    Returns:
        AutoxgbResult
    """
    tuner = AutoXGBoostTuner(
        measure=measure,
        control=control,
        par_set=par_set,
        mbo_learner=mbo_learner,
        max_nrounds=max_nrounds,
        early_stopping_rounds=early_stopping_rounds,
        early_stopping_fraction=early_stopping_fraction,
        build_final_model=build_final_model,
        design_size=design_size,
        impact_encoding_boundary=impact_encoding_boundary,
        nthread=nthread,
        tune_threshold=tune_threshold,
    )
    return tuner.fit(task)
