"""
Unit tests for parameter spaces, transformations and the initial design.
"""

# Standard Imports
from unittest.mock import MagicMock

# Third-Party Imports
import optuna
import pytest
from skopt.space import Categorical, Integer, Real

# Internal Imports
from autoxgboost import InvalidArgumentError
from autoxgboost.tuning import (
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


@pytest.mark.unit
def test_default_space_names_and_bounds():
    space = autoxgb_param_set()

    assert space.names == [
        "learning_rate", "gamma", "max_depth", "colsample_bytree",
        "colsample_bylevel", "reg_lambda", "reg_alpha", "subsample",
    ]
    assert (space["learning_rate"].lower, space["learning_rate"].upper) == (0.01, 0.2)
    assert (space["max_depth"].lower, space["max_depth"].upper) == (3, 20)
    assert space["gamma"].trafo is pow2
    assert space.is_numeric


@pytest.mark.unit
def test_trafo_applies_pow2():
    space = scale_pos_weight_param_set() + impact_encoding_param_set()
    x = space.trafo({"scale_pos_weight": 3.0, "impact_smoothing": -1.0})

    assert x == {"scale_pos_weight": 8.0, "impact_smoothing": 0.5}


@pytest.mark.unit
def test_integer_params_are_rounded():
    space = autoxgb_param_set()
    x = {name: 0.5 for name in space.names}
    x["max_depth"] = 6.0

    assert space.trafo(x)["max_depth"] == 6
    assert isinstance(space.trafo(x)["max_depth"], int)


@pytest.mark.unit
def test_combining_spaces_rejects_duplicates():
    with pytest.raises(InvalidArgumentError):
        autoxgb_param_set() + ParameterSpace([NumericParam("gamma", 0, 1)])


@pytest.mark.unit
def test_invalid_bounds_raise():
    with pytest.raises(InvalidArgumentError):
        NumericParam("a", 1, 0)
    with pytest.raises(InvalidArgumentError):
        IntegerParam("b", 5, 4)
    with pytest.raises(InvalidArgumentError):
        DiscreteParam("c", ())


@pytest.mark.unit
def test_skopt_space_types():
    space = ParameterSpace([
        NumericParam("a", 0, 1),
        IntegerParam("b", 1, 5),
        DiscreteParam("c", ("gbtree", "dart")),
    ])
    dims = space.to_skopt_space()

    assert [type(d) for d in dims] == [Real, Integer, Categorical]
    assert [d.name for d in dims] == ["a", "b", "c"]
    assert not space.is_numeric


@pytest.mark.unit
def test_suggest_uses_trial():
    trial = MagicMock(spec=optuna.Trial)
    trial.suggest_float.side_effect = lambda name, low, high: (low + high) / 2
    trial.suggest_int.side_effect = lambda name, low, high: low

    x = autoxgb_param_set().suggest(trial)

    assert x["max_depth"] == 3
    assert x["subsample"] == pytest.approx(0.75)


@pytest.mark.unit
def test_design_is_feasible_and_reproducible():
    space = autoxgb_param_set() + scale_pos_weight_param_set()
    design = generate_design(8, space, random_state=0)

    assert len(design) == 8
    assert all(space.is_feasible(x) for x in design)
    assert all(isinstance(x["max_depth"], int) for x in design)
    assert design == generate_design(8, space, random_state=0)


@pytest.mark.unit
def test_design_spreads_over_each_dimension():
    space = ParameterSpace([NumericParam("a", 0, 1)])
    values = sorted(x["a"] for x in generate_design(10, space, random_state=1))

    # one point per tenth of the interval
    for i, value in enumerate(values):
        assert i / 10 <= value <= (i + 1) / 10


@pytest.mark.unit
def test_design_size_must_be_positive():
    with pytest.raises(InvalidArgumentError):
        generate_design(0, autoxgb_param_set())
