"""
Unit tests for AutoXGBoostSettings.

Integers accept integral floats only, flags must be real booleans and
out-of-range values are rejected with InvalidArgumentError.
"""

# Standard Imports
import sys

# Third-Party Imports
import numpy as np
import pytest
from pydantic import ValidationError

# Internal Imports
from autoxgboost import AutoXGBoostSettings, InvalidArgumentError


@pytest.mark.unit
def test_defaults():
    s = AutoXGBoostSettings()

    assert s.max_nrounds == 10 ** 6
    assert s.early_stopping_rounds == 10
    assert s.early_stopping_fraction == pytest.approx(0.8)
    assert s.build_final_model is True
    assert s.design_size == 15
    assert s.impact_encoding_boundary == 10
    assert s.nthread is None
    assert s.tune_threshold is True


@pytest.mark.unit
def test_integral_floats_are_accepted():
    s = AutoXGBoostSettings.from_kwargs(early_stopping_rounds=5.0, design_size=3.0, nthread=2.0)

    assert s.early_stopping_rounds == 5
    assert isinstance(s.early_stopping_rounds, int)
    assert s.nthread == 2


@pytest.mark.unit
def test_infinite_boundary_maps_to_maxsize():
    s = AutoXGBoostSettings.from_kwargs(impact_encoding_boundary=float("inf"))
    assert s.impact_encoding_boundary == sys.maxsize


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [
        {"early_stopping_rounds": 0},
        {"early_stopping_rounds": -1},
        {"early_stopping_rounds": 2.5},
        {"early_stopping_rounds": True},
        {"early_stopping_rounds": "10"},
        {"early_stopping_fraction": 1.5},
        {"early_stopping_fraction": -0.1},
        {"early_stopping_fraction": float("nan")},
        {"design_size": 0},
        {"nthread": 0},
        {"impact_encoding_boundary": -1},
        {"build_final_model": 1},
        {"build_final_model": "yes"},
        {"tune_threshold": None},
        {"max_nrounds": 0},
        {"unknown_option": 1},
    ],
)
def test_invalid_arguments_raise(kwargs):
    with pytest.raises(InvalidArgumentError) as exc_info:
        AutoXGBoostSettings.from_kwargs(**kwargs)

    assert isinstance(exc_info.value, ValueError)
    assert isinstance(exc_info.value.__cause__, ValidationError)


@pytest.mark.unit
def test_numpy_bool_is_a_flag():
    s = AutoXGBoostSettings.from_kwargs(tune_threshold=np.bool_(False))
    assert s.tune_threshold is False


@pytest.mark.unit
def test_settings_are_frozen():
    s = AutoXGBoostSettings()
    with pytest.raises(ValidationError):
        s.design_size = 4


@pytest.mark.unit
def test_to_dict_round_trip():
    s = AutoXGBoostSettings.from_kwargs(design_size=4, nthread=1)
    assert AutoXGBoostSettings(**s.to_dict()) == s
