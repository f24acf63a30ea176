"""
Parameter Spaces for XGBoost Tuning
===================================

A ``ParameterSpace`` is an ordered set of named parameters with box bounds.
Optimizers search the raw space; a parameter's ``trafo`` maps a raw value to
the value handed to the learner (``pow2`` searches on a log2 scale).

Default spaces:
- autoxgb_param_set: the XGBoost booster parameters
- scale_pos_weight_param_set: class weight for binary classification
- impact_encoding_param_set: smoothing of the impact encoder
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np
import optuna
from skopt.sampler import Lhs
from skopt.space import Categorical, Dimension, Integer, Real

from ..exceptions import InvalidArgumentError


def pow2(x: float) -> float:
    """2 to the power of x"""
    return float(2.0 ** x)


def _to_python(value: Any) -> Any:
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, np.bool_):
        return bool(value)
    return value


@dataclass(frozen=True)
class NumericParam:
    """Continuous parameter on [lower, upper]"""

    name: str
    lower: float
    upper: float
    trafo: Optional[Callable[[float], float]] = None

    def __post_init__(self):
        if not self.lower < self.upper:
            raise InvalidArgumentError(
                f"Parameter '{self.name}': lower ({self.lower}) must be below upper ({self.upper})"
            )

    def to_skopt(self) -> Dimension:
        return Real(self.lower, self.upper, prior="uniform", name=self.name)

    def suggest(self, trial: optuna.Trial) -> float:
        return trial.suggest_float(self.name, self.lower, self.upper)

    def contains(self, value: Any) -> bool:
        return self.lower <= value <= self.upper

    def cast(self, value: Any) -> float:
        return float(value)

    def transform(self, value: Any) -> Any:
        value = self.cast(value)
        return self.trafo(value) if self.trafo is not None else value


@dataclass(frozen=True)
class IntegerParam:
    """Integer parameter on [lower, upper]"""

    name: str
    lower: int
    upper: int
    trafo: Optional[Callable[[int], Any]] = None

    def __post_init__(self):
        if not self.lower <= self.upper:
            raise InvalidArgumentError(
                f"Parameter '{self.name}': lower ({self.lower}) exceeds upper ({self.upper})"
            )

    def to_skopt(self) -> Dimension:
        return Integer(self.lower, self.upper, name=self.name)

    def suggest(self, trial: optuna.Trial) -> int:
        return trial.suggest_int(self.name, self.lower, self.upper)

    def contains(self, value: Any) -> bool:
        return float(value).is_integer() and self.lower <= value <= self.upper

    def cast(self, value: Any) -> int:
        return int(round(float(value)))

    def transform(self, value: Any) -> Any:
        value = self.cast(value)
        return self.trafo(value) if self.trafo is not None else value


@dataclass(frozen=True)
class DiscreteParam:
    """Parameter taking one of a fixed set of values"""

    name: str
    values: Tuple[Any, ...]
    trafo: Optional[Callable[[Any], Any]] = None

    def __post_init__(self):
        if len(self.values) == 0:
            raise InvalidArgumentError(f"Parameter '{self.name}' needs at least one value")

    def to_skopt(self) -> Dimension:
        return Categorical(list(self.values), name=self.name)

    def suggest(self, trial: optuna.Trial) -> Any:
        return trial.suggest_categorical(self.name, list(self.values))

    def contains(self, value: Any) -> bool:
        return value in self.values

    def cast(self, value: Any) -> Any:
        return _to_python(value)

    def transform(self, value: Any) -> Any:
        value = self.cast(value)
        return self.trafo(value) if self.trafo is not None else value


Param = Union[NumericParam, IntegerParam, DiscreteParam]


class ParameterSpace:
    """Ordered collection of uniquely named parameters"""

    def __init__(self, params: Sequence[Param] = ()):
        names = [p.name for p in params]
        duplicated = sorted({name for name in names if names.count(name) > 1})
        if duplicated:
            raise InvalidArgumentError(f"Duplicated parameter names: {duplicated}")
        self._params: List[Param] = list(params)

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._params]

    @property
    def is_numeric(self) -> bool:
        """True when no parameter is discrete"""
        return all(isinstance(p, (NumericParam, IntegerParam)) for p in self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[Param]:
        return iter(self._params)

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __getitem__(self, name: str) -> Param:
        for param in self._params:
            if param.name == name:
                return param
        raise KeyError(name)

    def __add__(self, other: "ParameterSpace") -> "ParameterSpace":
        return ParameterSpace(self._params + list(other))

    def __repr__(self) -> str:
        return f"ParameterSpace({self.names})"

    def to_skopt_space(self) -> List[Dimension]:
        """Convert to scikit-optimize dimensions"""
        return [p.to_skopt() for p in self._params]

    def suggest(self, trial: optuna.Trial) -> Dict[str, Any]:
        """Sample raw values with an Optuna trial"""
        return {p.name: p.suggest(trial) for p in self._params}

    def vector_to_dict(self, values: Sequence[Any]) -> Dict[str, Any]:
        """Raw point from a value vector in parameter order"""
        if len(values) != len(self._params):
            raise InvalidArgumentError(
                f"Expected {len(self._params)} values, got {len(values)}"
            )
        return {p.name: p.cast(v) for p, v in zip(self._params, values)}

    def dict_to_vector(self, x: Dict[str, Any]) -> List[Any]:
        return [x[name] for name in self.names]

    def is_feasible(self, x: Dict[str, Any]) -> bool:
        return set(x) == set(self.names) and all(p.contains(x[p.name]) for p in self._params)

    def trafo(self, x: Dict[str, Any]) -> Dict[str, Any]:
        """Apply the parameter transformations to a raw point"""
        missing = [name for name in self.names if name not in x]
        if missing:
            raise InvalidArgumentError(f"Point is missing parameters: {missing}")
        return {p.name: p.transform(x[p.name]) for p in self._params}


def autoxgb_param_set() -> ParameterSpace:
    """Default search space over the XGBoost booster parameters"""
    return ParameterSpace([
        NumericParam("learning_rate", 0.01, 0.2),
        NumericParam("gamma", -7, 6, trafo=pow2),
        IntegerParam("max_depth", 3, 20),
        NumericParam("colsample_bytree", 0.5, 1),
        NumericParam("colsample_bylevel", 0.5, 1),
        NumericParam("reg_lambda", -10, 10, trafo=pow2),
        NumericParam("reg_alpha", -10, 10, trafo=pow2),
        NumericParam("subsample", 0.5, 1),
    ])


def scale_pos_weight_param_set() -> ParameterSpace:
    """Weight of the positive class, added for binary classification"""
    return ParameterSpace([NumericParam("scale_pos_weight", -10, 10, trafo=pow2)])


def impact_encoding_param_set() -> ParameterSpace:
    """Smoothing of the impact encoder, added when columns are impact encoded"""
    return ParameterSpace([NumericParam("impact_smoothing", -5, 10, trafo=pow2)])


def generate_design(
    n: int,
    par_set: ParameterSpace,
    random_state: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Maximin Latin hypercube design of ``n`` raw points.

    Args:
        n: Number of points
        par_set: Space to cover
        random_state: Seed of the sampler
    """
    if n < 1:
        raise InvalidArgumentError(f"Design size must be at least 1, got {n}")
    if len(par_set) == 0:
        raise InvalidArgumentError("Cannot generate a design for an empty parameter space")

    sampler = Lhs(criterion="maximin", iterations=1000)
    points = sampler.generate(par_set.to_skopt_space(), n, random_state=random_state)

    return [par_set.vector_to_dict(point) for point in points]
