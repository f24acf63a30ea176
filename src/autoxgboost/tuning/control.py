"""
Optimization Control
====================

Termination criteria and optimizer choices of the model-based optimization.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import InvalidArgumentError


class TuningStrategy(Enum):
    """Search strategies"""
    BAYESIAN_GP = "bayesian_gp"  # Gaussian process surrogate
    BAYESIAN_RF = "bayesian_rf"  # Random forest surrogate
    OPTUNA_TPE = "optuna_tpe"  # Tree-structured Parzen Estimator


class AcquisitionFunction(Enum):
    """Acquisition functions of the scikit-optimize strategies"""
    EI = "EI"
    PI = "PI"
    LCB = "LCB"


@dataclass
class MBOControl:
    """
    Control policy of the optimization.

    The search ends after ``iters`` sequential evaluations following the
    initial design, or once ``time_budget`` seconds have elapsed, whichever
    comes first. ``kappa`` weights exploration for LCB (1.0 is a lower
    confidence bound of one standard deviation), ``xi`` is the improvement
    margin of EI and PI.
    """

    iters: int = 160
    time_budget: Optional[float] = 3600
    strategy: TuningStrategy = TuningStrategy.BAYESIAN_GP
    acquisition_function: AcquisitionFunction = AcquisitionFunction.LCB
    kappa: float = 1.0
    xi: float = 0.01
    random_state: Optional[int] = None
    show_progress: bool = True

    def __post_init__(self):
        if isinstance(self.strategy, str):
            self.strategy = TuningStrategy(self.strategy)
        if isinstance(self.acquisition_function, str):
            self.acquisition_function = AcquisitionFunction(self.acquisition_function)
        self._check_termination(self.iters, self.time_budget)
        if self.kappa < 0:
            raise InvalidArgumentError(f"kappa must be non-negative, got {self.kappa}")
        if self.xi < 0:
            raise InvalidArgumentError(f"xi must be non-negative, got {self.xi}")

    @staticmethod
    def _check_termination(iters: int, time_budget: Optional[float]):
        if isinstance(iters, bool) or int(iters) != iters or iters < 0:
            raise InvalidArgumentError(f"iters must be a non-negative integer, got {iters!r}")
        if time_budget is not None and time_budget <= 0:
            raise InvalidArgumentError(f"time_budget must be positive, got {time_budget!r}")

    def set_termination(
        self,
        iters: Optional[int] = None,
        time_budget: Optional[float] = None,
    ) -> "MBOControl":
        """Update the termination criteria in place"""
        iters = self.iters if iters is None else iters
        time_budget = self.time_budget if time_budget is None else time_budget
        self._check_termination(iters, time_budget)
        self.iters = int(iters)
        self.time_budget = time_budget
        return self
