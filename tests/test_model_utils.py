"""
Tests for saving and loading tuning results and for the optimization plot.
"""

# Third-Party Imports
import numpy as np
import pytest
from matplotlib.figure import Figure

# Internal Imports
from autoxgboost import ModelLoader, ModelSaver, autoxgboost, plot_optimization_history


@pytest.fixture
def regression_result(regression_task, fast_control, fast_settings):
    return autoxgboost(regression_task, control=fast_control, **fast_settings)


@pytest.mark.integration
def test_save_and_load_result(regression_result, regression_task, tmp_path):
    path = ModelSaver().save_result(regression_result, tmp_path / "run")
    loader = ModelLoader()

    model = loader.load_model(path)
    np.testing.assert_allclose(
        model.predict(regression_task.features),
        regression_result.predict(regression_task.features),
    )

    metadata = loader.load_metadata(path)
    assert metadata["nrounds"] == regression_result.nrounds
    assert metadata["measure"] == "mse"

    op_path = loader.load_optimization_path(path)
    assert len(op_path) == regression_result.optim_result.n_evals
    assert {"y", "dob", "exec_time", "nrounds"} <= set(op_path.columns)


@pytest.mark.unit
def test_missing_files(tmp_path):
    loader = ModelLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_model(tmp_path)
    with pytest.raises(FileNotFoundError):
        loader.load_optimization_path(tmp_path)
    assert loader.load_metadata(tmp_path) == {}


@pytest.mark.integration
def test_plot_optimization_history(regression_result, tmp_path):
    save_path = tmp_path / "history.png"
    fig = plot_optimization_history(regression_result.optim_result, save_path=str(save_path),
                                    measure_name="mse")

    assert isinstance(fig, Figure)
    assert save_path.exists()
    assert len(fig.axes) == 2
