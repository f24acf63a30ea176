"""
Integration tests for the autoxgboost entry point.

Runs are kept small: a design of three points, one sequential iteration and
at most 50 boosting rounds.
"""

# Third-Party Imports
import numpy as np
import pandas as pd
import pytest
from rich.console import Console

# Internal Imports
from autoxgboost import (
    AutoxgbResult,
    InvalidArgumentError,
    MBOControl,
    ModelNotFittedError,
    Task,
    UnsupportedTaskError,
    autoxgboost,
    make_classif_task,
    make_regr_task,
)
from autoxgboost.models import get_learner


@pytest.mark.integration
def test_binary_classification(binary_task, fast_control, fast_settings):
    result = autoxgboost(binary_task, control=fast_control, **fast_settings)

    assert isinstance(result, AutoxgbResult)
    assert result.measure.name == "mmce"
    assert "scale_pos_weight" in result.best_params
    assert 1 <= result.nrounds <= 50
    assert isinstance(result.threshold, float)
    assert 0.0 <= result.best_score <= 1.0
    assert result.optim_result.n_evals == 4

    learner = get_learner(result.final_learner)
    assert learner.nrounds == result.nrounds
    assert learner.threshold == result.threshold
    assert learner.early_stopping_index is None
    assert learner.predict_type == "prob"

    predictions = result.predict(binary_task.features)
    assert set(predictions) <= {"neg", "pos"}
    assert result.predict_proba(binary_task.features).shape == (binary_task.size, 2)


@pytest.mark.integration
def test_multiclass_classification(multiclass_task, fast_control, fast_settings):
    result = autoxgboost(multiclass_task, control=fast_control, **fast_settings)

    assert "scale_pos_weight" not in result.best_params
    assert isinstance(result.threshold, dict)
    assert set(result.threshold) == {"a", "b", "c"}
    assert sum(result.threshold.values()) == pytest.approx(1.0)
    assert get_learner(result.final_learner).objective == "multi:softprob"


@pytest.mark.integration
def test_classification_without_threshold_tuning(binary_task, fast_control, fast_settings):
    result = autoxgboost(binary_task, control=fast_control, tune_threshold=False, **fast_settings)

    assert result.threshold is None
    assert get_learner(result.final_learner).predict_type == "response"


@pytest.mark.integration
def test_probability_measure_sets_predict_type(binary_task, fast_control, fast_settings):
    result = autoxgboost(binary_task, measure="auc", control=fast_control,
                         tune_threshold=False, **fast_settings)

    assert get_learner(result.final_learner).predict_type == "prob"
    assert result.best_score == pytest.approx(result.optim_result.op_path["y"].max())


@pytest.mark.integration
def test_regression_with_categorical_features(categorical_task, fast_control, fast_settings):
    result = autoxgboost(categorical_task, control=fast_control, nthread=1, **fast_settings)

    assert result.measure.name == "mse"
    assert "impact_smoothing" in result.best_params
    assert result.threshold is None
    assert list(result.final_learner.named_steps) == ["impact", "dummy", "learner"]
    assert get_learner(result.final_learner).nthread == 1

    predictions = result.predict(categorical_task.features)
    assert predictions.shape == (categorical_task.size,)
    assert np.isfinite(predictions).all()


@pytest.mark.integration
def test_infinite_boundary_dummy_encodes_everything(categorical_task, fast_control, fast_settings):
    result = autoxgboost(categorical_task, control=fast_control,
                         impact_encoding_boundary=float("inf"), build_final_model=False,
                         **fast_settings)

    assert "impact_smoothing" not in result.best_params
    assert list(result.final_learner.named_steps) == ["dummy", "learner"]
    assert result.final_model is None
    with pytest.raises(ModelNotFittedError):
        result.predict(categorical_task.features)


@pytest.mark.integration
def test_result_reporting(regression_task, fast_control, fast_settings):
    result = autoxgboost(regression_task, control=fast_control, **fast_settings)

    summary = result.summary()
    assert "Recommended parameters" in summary
    assert f"nrounds: {result.nrounds}" in summary
    assert str(result) == summary

    as_dict = result.to_dict()
    assert as_dict["task_type"] == "regr"
    assert as_dict["nrounds"] == result.nrounds
    assert as_dict["settings"]["design_size"] == 3

    console = Console(record=True, width=120)
    result.display(console=console)
    assert "nrounds" in console.export_text()

    with pytest.raises(InvalidArgumentError):
        result.predict_proba(regression_task.features)


@pytest.mark.unit
def test_unsupported_task_type_raises(regression_data):
    task = Task(regression_data, "y", task_type="surv")
    with pytest.raises(UnsupportedTaskError):
        autoxgboost(task)


@pytest.mark.unit
@pytest.mark.parametrize(
    "kwargs",
    [
        {"early_stopping_rounds": -1},
        {"early_stopping_fraction": 2.0},
        {"design_size": 0},
        {"nthread": 0},
        {"build_final_model": "yes"},
        {"tune_threshold": 1},
        {"max_nrounds": 1.5},
    ],
)
def test_invalid_arguments_raise(regression_task, kwargs):
    with pytest.raises(InvalidArgumentError):
        autoxgboost(regression_task, **kwargs)


@pytest.mark.unit
def test_measure_must_fit_the_task(regression_task):
    with pytest.raises(InvalidArgumentError):
        autoxgboost(regression_task, measure="mmce")


@pytest.mark.unit
def test_task_must_be_a_task(regression_data):
    with pytest.raises(InvalidArgumentError):
        autoxgboost(regression_data)


@pytest.mark.integration
@pytest.mark.parametrize("seed", range(5))
def test_multiclass_with_single_row_class(rng, fast_settings, seed):
    n = 60
    y = np.array(["a"] * 30 + ["b"] + ["c"] * 29, dtype=object)
    x = np.where(y == "a", 0.0, 2.0) + rng.normal(scale=0.3, size=n)
    task = make_classif_task(pd.DataFrame({"x": x, "z": rng.normal(size=n), "y": y}), "y")
    control = MBOControl(iters=1, time_budget=None, random_state=seed, show_progress=False)

    result = autoxgboost(task, control=control, tune_threshold=False, **fast_settings)

    assert np.isfinite(result.best_score)
    assert get_learner(result.final_learner).classes_ == ["a", "b", "c"]
    assert set(result.predict(task.features)) <= {"a", "b", "c"}


@pytest.mark.integration
def test_levels_with_brackets_in_their_names(rng, fast_control, fast_settings):
    n = 150
    band = rng.choice(["[0-10)", "[10-20)", "<0"], size=n)
    x = rng.normal(size=n)
    y = x + np.where(band == "<0", -1.0, 1.0) + rng.normal(scale=0.2, size=n)
    task = make_regr_task(pd.DataFrame({"band": band.astype(object), "x": x, "y": y}), "y")

    result = autoxgboost(task, control=fast_control, **fast_settings)

    learner = get_learner(result.final_learner)
    assert learner.feature_names_ == ["band.<0", "band.[0-10)", "band.[10-20)", "x"]
    assert np.isfinite(result.predict(task.features)).all()
