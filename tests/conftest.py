"""
Pytest Configuration and Shared Fixtures for the autoxgboost Test Suite.

Fixtures:
- Small synthetic binary, multiclass and regression datasets
- A mixed dataset with a low- and a high-cardinality categorical column
- Fast control settings for end-to-end tuning runs
"""

# Third-Party Imports
import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

# Internal Imports
from autoxgboost import MBOControl, make_classif_task, make_regr_task


# DATA FIXTURES
@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def binary_data(rng):
    """Two informative features, labels 'neg'/'pos'."""
    n = 200
    x1 = rng.normal(size=n)
    x2 = rng.normal(size=n)
    noise = rng.normal(scale=0.5, size=n)
    y = np.where(x1 + 0.5 * x2 + noise > 0, "pos", "neg")
    return pd.DataFrame({"x1": x1, "x2": x2, "y": y})


@pytest.fixture
def multiclass_data(rng):
    """Three classes separated along x1."""
    n = 240
    x1 = rng.normal(size=n)
    x2 = rng.normal(size=n)
    score = x1 + rng.normal(scale=0.3, size=n)
    y = np.select([score < -0.5, score < 0.5], ["a", "b"], default="c")
    return pd.DataFrame({"x1": x1, "x2": x2, "y": y})


@pytest.fixture
def regression_data(rng):
    n = 200
    x1 = rng.normal(size=n)
    x2 = rng.uniform(-1, 1, size=n)
    y = 3 * x1 - 2 * x2 + rng.normal(scale=0.1, size=n)
    return pd.DataFrame({"x1": x1, "x2": x2, "y": y})


@pytest.fixture
def categorical_data(rng):
    """'color' has 3 levels, 'city' has 15 levels."""
    n = 300
    color = rng.choice(["red", "green", "blue"], size=n)
    city = rng.choice([f"city_{i:02d}" for i in range(15)], size=n)
    x = rng.normal(size=n)
    effect = (color == "red").astype(float) + np.array([int(c[-2:]) for c in city]) / 7.0
    y = x + effect + rng.normal(scale=0.2, size=n)
    return pd.DataFrame({
        "color": pd.Categorical(color),
        "city": city.astype(object),
        "x": x,
        "y": y,
    })


# TASK FIXTURES
@pytest.fixture
def binary_task(binary_data):
    return make_classif_task(binary_data, target="y")


@pytest.fixture
def multiclass_task(multiclass_data):
    return make_classif_task(multiclass_data, target="y")


@pytest.fixture
def regression_task(regression_data):
    return make_regr_task(regression_data, target="y")


@pytest.fixture
def categorical_task(categorical_data):
    return make_regr_task(categorical_data, target="y")


# CONTROL FIXTURES
@pytest.fixture
def fast_control():
    """One sequential iteration, no time budget, no console output."""
    return MBOControl(iters=1, time_budget=None, random_state=1, show_progress=False)


@pytest.fixture
def fast_settings():
    return dict(design_size=3, max_nrounds=50, early_stopping_rounds=5)
