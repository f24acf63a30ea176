"""
Model-Based Optimization
========================

Sequential model-based optimization of a noisy, expensive black-box
function over a ``ParameterSpace``.

The initial design is evaluated first. Afterwards a surrogate model is
refitted on all observations and the point maximizing the acquisition
function is evaluated next, until ``control.iters`` sequential evaluations
are done or ``control.time_budget`` seconds have elapsed. The returned
point is the best observed one.

Backends:
- scikit-optimize ``Optimizer`` (ask/tell) with a GP or random forest surrogate
- Optuna TPE with the design enqueued as the first trials
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np
import optuna
import pandas as pd
from loguru import logger
from optuna.samplers import TPESampler
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from skopt import Optimizer
from skopt.space import Space

from ..exceptions import InvalidArgumentError
from .control import MBOControl, TuningStrategy
from .param_sets import ParameterSpace

optuna.logging.set_verbosity(optuna.logging.WARNING)


@dataclass
class ObjectiveValue:
    """Value of the objective plus additional information about the evaluation"""
    y: float
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MBOResult:
    """
    Outcome of an optimization run.

    ``op_path`` holds one row per evaluation: the raw parameter values, ``y``,
    ``dob`` (0 for the design, otherwise the sequential iteration), the
    execution time and the extras reported by the objective.
    """

    x: Dict[str, Any]
    x_trafo: Dict[str, Any]
    y: float
    extras: Dict[str, Any]
    op_path: pd.DataFrame
    n_evals: int
    final_state: str
    minimize: bool = True

    def best_so_far(self) -> np.ndarray:
        """Best observed y after every evaluation"""
        ys = self.op_path["y"].to_numpy(dtype=float)
        return np.minimum.accumulate(ys) if self.minimize else np.maximum.accumulate(ys)


ObjectiveFunction = Callable[[Dict[str, Any]], Union[ObjectiveValue, float]]


class _History:
    """Records evaluations in the order they happen"""

    def __init__(self, par_set: ParameterSpace, minimize: bool):
        self.par_set = par_set
        self.minimize = minimize
        self.rows: List[Dict[str, Any]] = []
        self.points: List[Dict[str, Any]] = []
        self.extras: List[Dict[str, Any]] = []

    def evaluate(self, fun: ObjectiveFunction, x: Dict[str, Any], dob: int) -> float:
        x_trafo = self.par_set.trafo(x)
        start = time.perf_counter()
        value = fun(x_trafo)
        exec_time = time.perf_counter() - start

        if not isinstance(value, ObjectiveValue):
            value = ObjectiveValue(y=float(value))
        y = float(value.y)

        self.points.append(dict(x))
        self.extras.append(dict(value.extras))
        self.rows.append({**x, "y": y, "dob": dob, "exec_time": exec_time, **value.extras})

        logger.debug(f"🔍 Evaluation {len(self.rows)} (dob {dob}): y = {y:.6f}")
        return y

    def best_y(self) -> float:
        ys = [row["y"] for row in self.rows]
        return float(np.nanmin(ys) if self.minimize else np.nanmax(ys))

    def to_result(self, final_state: str) -> MBOResult:
        if not self.rows:
            raise InvalidArgumentError("No evaluations were made")
        ys = np.array([row["y"] for row in self.rows], dtype=float)
        if np.isnan(ys).all():
            raise InvalidArgumentError("All evaluations returned NaN")
        best = int(np.nanargmin(ys) if self.minimize else np.nanargmax(ys))
        x = self.points[best]

        return MBOResult(
            x=x,
            x_trafo=self.par_set.trafo(x),
            y=float(ys[best]),
            extras=self.extras[best],
            op_path=pd.DataFrame(self.rows),
            n_evals=len(self.rows),
            final_state=final_state,
            minimize=self.minimize,
        )


def _progress(control: MBOControl) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        disable=not control.show_progress,
    )


def _budget_exhausted(start: float, control: MBOControl) -> bool:
    return control.time_budget is not None and time.time() - start >= control.time_budget


def _resolve_surrogate(par_set: ParameterSpace, control: MBOControl, learner: Any) -> Any:
    if learner is not None:
        return learner
    if control.strategy == TuningStrategy.BAYESIAN_RF or not par_set.is_numeric:
        return "RF"
    return "GP"


def _mbo_skopt(
    fun: ObjectiveFunction,
    par_set: ParameterSpace,
    control: MBOControl,
    design: List[Dict[str, Any]],
    learner: Any,
    minimize: bool,
) -> MBOResult:
    surrogate = _resolve_surrogate(par_set, control, learner)
    sign = 1.0 if minimize else -1.0
    optimizer = Optimizer(
        dimensions=par_set.to_skopt_space(),
        base_estimator=surrogate,
        n_initial_points=0,
        acq_func=control.acquisition_function.value,
        acq_func_kwargs={"kappa": control.kappa, "xi": control.xi},
        random_state=control.random_state,
    )
    logger.info(
        f"🧠 Surrogate: {surrogate if isinstance(surrogate, str) else type(surrogate).__name__}, "
        f"acquisition: {control.acquisition_function.value}"
    )

    history = _History(par_set, minimize)
    start = time.time()
    final_state = "iters"

    with _progress(control) as progress:
        bar = progress.add_task("Initial design...", total=len(design) + control.iters)

        ys = []
        for x in design:
            ys.append(sign * history.evaluate(fun, x, dob=0))
            progress.update(bar, advance=1, description=f"Design | Best: {history.best_y():.4f}")
        optimizer.tell([par_set.dict_to_vector(x) for x in design], ys)

        for iteration in range(1, control.iters + 1):
            if _budget_exhausted(start, control):
                final_state = "time"
                break
            vector = optimizer.ask()
            x = par_set.vector_to_dict(vector)
            y = history.evaluate(fun, x, dob=iteration)
            optimizer.tell(par_set.dict_to_vector(x), sign * y)
            progress.update(
                bar,
                advance=1,
                description=f"Iteration {iteration}/{control.iters} | Best: {history.best_y():.4f}",
            )

    return history.to_result(final_state)


def _mbo_optuna(
    fun: ObjectiveFunction,
    par_set: ParameterSpace,
    control: MBOControl,
    design: List[Dict[str, Any]],
    minimize: bool,
) -> MBOResult:
    study = optuna.create_study(
        direction="minimize" if minimize else "maximize",
        sampler=TPESampler(n_startup_trials=0, seed=control.random_state),
    )
    for x in design:
        study.enqueue_trial(x)

    history = _History(par_set, minimize)
    n_trials = len(design) + control.iters

    def objective(trial: optuna.Trial) -> float:
        x = par_set.suggest(trial)
        dob = max(trial.number - len(design) + 1, 0)
        return history.evaluate(fun, x, dob=dob)

    with _progress(control) as progress:
        bar = progress.add_task("Optuna TPE...", total=n_trials)

        def progress_callback(study, trial):
            progress.update(
                bar,
                advance=1,
                description=f"Trial {trial.number + 1}/{n_trials} | Best: {study.best_value:.4f}",
            )

        study.optimize(
            objective,
            n_trials=n_trials,
            timeout=control.time_budget,
            callbacks=[progress_callback],
            show_progress_bar=False,
        )

    final_state = "iters" if len(history.rows) >= n_trials else "time"
    return history.to_result(final_state)


def mbo(
    fun: ObjectiveFunction,
    par_set: ParameterSpace,
    control: Optional[MBOControl] = None,
    design: Optional[List[Dict[str, Any]]] = None,
    learner: Any = None,
    minimize: bool = True,
) -> MBOResult:
    """
    Optimize ``fun`` over ``par_set``.

    Args:
        fun: Called with the transformed point, returns a float or an ``ObjectiveValue``
        par_set: Search space
        control: Termination and optimizer settings
        design: Raw initial points; one random point if omitted
        learner: Surrogate for the scikit-optimize strategies, a scikit-optimize
            estimator name ("GP", "RF", "ET", "GBRT") or regressor instance
        minimize: Direction of the optimization

    Returns:
        MBOResult with the best observed point
    """
    control = control or MBOControl()
    if design is None:
        design = [par_set.vector_to_dict(v) for v in par_set_sample(par_set, 1, control.random_state)]
    if not design:
        raise InvalidArgumentError("The initial design must contain at least one point")
    infeasible = [x for x in design if not par_set.is_feasible(x)]
    if infeasible:
        raise InvalidArgumentError(f"Design points outside the parameter space: {infeasible[:3]}")

    logger.info(
        f"🚀 Optimizing {len(par_set)} parameter(s) with {control.strategy.value}: "
        f"design of {len(design)}, up to {control.iters} iteration(s), "
        f"time budget {control.time_budget}s"
    )

    if control.strategy == TuningStrategy.OPTUNA_TPE:
        result = _mbo_optuna(fun, par_set, control, design, minimize)
    else:
        result = _mbo_skopt(fun, par_set, control, design, learner, minimize)

    logger.info(
        f"✅ Optimization finished ({result.final_state}) after {result.n_evals} evaluation(s), "
        f"best y = {result.y:.6f}"
    )
    return result


def par_set_sample(par_set: ParameterSpace, n: int, random_state: Optional[int] = None) -> List[list]:
    """Uniform random raw points as value vectors"""
    return Space(par_set.to_skopt_space()).rvs(n_samples=n, random_state=random_state)
