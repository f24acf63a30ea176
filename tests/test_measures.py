"""
Unit tests for performance measures and predictions with thresholds.
"""

# Third-Party Imports
import numpy as np
import pytest

# Internal Imports
from autoxgboost import (
    InvalidArgumentError,
    MEASURES,
    Prediction,
    TaskType,
    default_measure,
    get_measure,
)
from autoxgboost.prediction import apply_threshold, threshold_vector


@pytest.fixture
def binary_pred():
    proba = np.array([[0.9, 0.1], [0.4, 0.6], [0.7, 0.3], [0.2, 0.8]])
    return Prediction(
        truth=np.array(["neg", "pos", "pos", "pos"], dtype=object),
        response=apply_threshold(proba, ["neg", "pos"]),
        task_type=TaskType.CLASSIFICATION,
        proba=proba,
        classes=["neg", "pos"],
    )


@pytest.mark.unit
def test_default_measures(binary_task, regression_task):
    assert default_measure(binary_task).name == "mmce"
    assert default_measure(regression_task).name == "mse"


@pytest.mark.unit
def test_get_measure_by_name_and_instance():
    mmce = get_measure("mmce")
    assert get_measure(mmce) is mmce
    with pytest.raises(InvalidArgumentError):
        get_measure("accuracy_of_everything")


@pytest.mark.unit
def test_measure_properties():
    assert "req.prob" in MEASURES["auc"].properties
    assert "req.prob" not in MEASURES["mmce"].properties
    assert MEASURES["mmce"].minimize
    assert not MEASURES["acc"].minimize


@pytest.mark.unit
def test_measure_task_check(multiclass_task, regression_task):
    with pytest.raises(InvalidArgumentError):
        MEASURES["auc"].check_task(multiclass_task)
    with pytest.raises(InvalidArgumentError):
        MEASURES["mmce"].check_task(regression_task)
    MEASURES["logloss"].check_task(multiclass_task)


@pytest.mark.unit
def test_classification_measures(binary_pred):
    assert MEASURES["mmce"].evaluate(binary_pred) == pytest.approx(0.25)
    assert MEASURES["acc"].evaluate(binary_pred) == pytest.approx(0.75)
    assert MEASURES["auc"].evaluate(binary_pred) == pytest.approx(1.0)


@pytest.mark.unit
def test_threshold_changes_response(binary_pred):
    pred = binary_pred.set_threshold(0.25)

    assert list(pred.response) == ["neg", "pos", "pos", "pos"]
    assert MEASURES["mmce"].evaluate(pred) == 0.0
    assert binary_pred.threshold is None


@pytest.mark.unit
def test_probability_measure_needs_proba(binary_pred):
    pred = Prediction(binary_pred.truth, binary_pred.response, TaskType.CLASSIFICATION,
                      classes=["neg", "pos"])
    with pytest.raises(InvalidArgumentError):
        MEASURES["auc"].evaluate(pred)


@pytest.mark.unit
def test_threshold_vector():
    np.testing.assert_allclose(threshold_vector(0.3, ["a", "b"]), [0.7, 0.3])
    np.testing.assert_allclose(
        threshold_vector({"a": 0.2, "b": 0.5, "c": 0.3}, ["c", "a", "b"]), [0.3, 0.2, 0.5]
    )
    with pytest.raises(InvalidArgumentError):
        threshold_vector(0.3, ["a", "b", "c"])
    with pytest.raises(InvalidArgumentError):
        threshold_vector({"a": 0.5}, ["a", "b"])


@pytest.mark.unit
def test_regression_measures():
    pred = Prediction(np.array([1.0, 2.0, 3.0]), np.array([1.0, 2.0, 5.0]), TaskType.REGRESSION)

    assert MEASURES["mse"].evaluate(pred) == pytest.approx(4 / 3)
    assert MEASURES["rmse"].evaluate(pred) == pytest.approx(np.sqrt(4 / 3))
    assert MEASURES["mae"].evaluate(pred) == pytest.approx(2 / 3)
