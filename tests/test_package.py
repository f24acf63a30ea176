"""
Unit tests for package level helpers.
"""

# Third-Party Imports
import pytest

# Internal Imports
import autoxgboost
from autoxgboost import InvalidArgumentError


@pytest.mark.unit
def test_package_info():
    info = autoxgboost.get_package_info()

    assert info["name"] == "autoxgboost"
    assert info["version"] == autoxgboost.__version__


@pytest.mark.unit
def test_dependencies_are_available():
    deps = autoxgboost.check_dependencies()

    assert {"xgboost", "skopt", "optuna", "loguru", "rich"} <= set(deps)
    assert all(deps.values())


@pytest.mark.unit
@pytest.mark.parametrize("format_type", ["rich", "simple", "json"])
def test_setup_logging_formats(format_type, tmp_path):
    log_file = tmp_path / "autoxgboost.log"
    autoxgboost.setup_logging(level="DEBUG", format_type=format_type, log_file=str(log_file))

    assert log_file.exists()
    autoxgboost.setup_logging()


@pytest.mark.unit
def test_setup_logging_rejects_unknown_format():
    with pytest.raises(InvalidArgumentError):
        autoxgboost.setup_logging(format_type="xml")
    autoxgboost.setup_logging()
