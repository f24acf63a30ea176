"""
Settings for autoxgboost runs
=============================

Validated container for the numeric and boolean knobs of ``autoxgboost()``.
Integers follow "integerish" semantics: ``10`` and ``10.0`` are accepted,
``10.5``, ``True`` and ``"10"`` are not. Flags must be real booleans.
"""

import math
import numbers
import sys
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidArgumentError


def _coerce_integerish(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("must be an integer, not a boolean")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        if math.isfinite(value) and float(value).is_integer():
            return int(value)
        raise ValueError(f"must be integerish, got {value!r}")
    raise ValueError(f"must be an integer, got {type(value).__name__}")


def _coerce_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"must be a number, got {type(value).__name__}")
    if math.isnan(value):
        raise ValueError("must not be NaN")
    return float(value)


def _require_flag(value: Any) -> Any:
    # numpy.bool_ is not a bool subclass
    if type(value).__name__ not in ("bool", "bool_"):
        raise ValueError(f"must be a single boolean, got {type(value).__name__}")
    return bool(value)


Integerish = Annotated[int, BeforeValidator(_coerce_integerish)]
Number = Annotated[float, BeforeValidator(_coerce_number)]
Flag = Annotated[bool, BeforeValidator(_require_flag)]


class AutoXGBoostSettings(BaseModel):
    """Numeric and boolean arguments of ``autoxgboost()``"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_nrounds: Integerish = Field(default=10 ** 6, ge=1)
    early_stopping_rounds: Integerish = Field(default=10, ge=1)
    early_stopping_fraction: Number = Field(default=4 / 5, ge=0.0, le=1.0)
    build_final_model: Flag = True
    design_size: Integerish = Field(default=15, ge=1)
    impact_encoding_boundary: Integerish = Field(default=10, ge=0)
    nthread: Optional[Integerish] = Field(default=None, ge=1)
    tune_threshold: Flag = True

    @field_validator("impact_encoding_boundary", mode="before")
    @classmethod
    def map_infinite_boundary(cls, v: Any) -> Any:
        """An infinite boundary means "dummy encode everything"."""
        if isinstance(v, numbers.Real) and not isinstance(v, bool) and math.isinf(v) and v > 0:
            return sys.maxsize
        return v

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> "AutoXGBoostSettings":
        """Build settings, turning pydantic errors into ``InvalidArgumentError``."""
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidArgumentError(f"Invalid argument(s): {problems}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
