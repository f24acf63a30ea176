"""
autoxgboost - Automatic Tuning of XGBoost
=========================================

Tunes XGBoost for classification and regression tasks with model-based
(Bayesian) optimization, early stopping on a holdout set, cardinality based
categorical encoding and decision threshold tuning.

Key Features:
- Bayesian optimization with scikit-optimize (GP / random forest surrogate)
  or Optuna TPE
- Number of boosting rounds chosen by early stopping
- Impact encoding of high-cardinality and dummy encoding of
  low-cardinality categorical features
- Threshold tuning for binary and multiclass classification
- Final model trained on the whole task

Modules:
--------
tasks: Supervised learning tasks
models: XGBoost learners and encoder pipelines
features: Categorical encoding
tuning: Parameter spaces, optimization and the autoxgboost entry point
validation: Holdout split for early stopping
utils: Persistence and plotting

Example Usage:
--------------
>>> from autoxgboost import autoxgboost, make_classif_task, MBOControl
>>>
>>> task = make_classif_task(data, target="species")
>>> control = MBOControl(iters=20, time_budget=600)
>>> result = autoxgboost(task, measure="mmce", control=control)
>>>
>>> print(result.summary())
>>> predictions = result.predict(new_data)
"""

__version__ = "1.0.0"
__author__ = "autoxgboost contributors"
__email__ = ""
__license__ = "MIT"

import sys
import warnings
from typing import Any, Dict, Optional

from loguru import logger

# Suppress warnings for cleaner output
warnings.filterwarnings("ignore", category=FutureWarning)
warnings.filterwarnings("ignore", category=DeprecationWarning)

from .exceptions import (
    AutoXGBoostError,
    InvalidArgumentError,
    ModelNotFittedError,
    UnsupportedTaskError,
)
from .config import AutoXGBoostSettings
from .tasks import Task, TaskType, make_classif_task, make_regr_task
from .prediction import Prediction
from .measures import MEASURES, Measure, default_measure, get_measure

# Model exports
from .models import (
    XGBoostClassifierLearner,
    XGBoostRegressorLearner,
    build_base_learner,
)

# Feature encoding exports
from .features import DummyEncoder, ImpactEncoder, partition_categorical_columns

# Tuning exports
from .tuning import (
    AcquisitionFunction,
    AutoXGBoostTuner,
    AutoxgbResult,
    MBOControl,
    MBOResult,
    ParameterSpace,
    TuningStrategy,
    autoxgb_param_set,
    autoxgboost,
    generate_design,
    impact_encoding_param_set,
    mbo,
    scale_pos_weight_param_set,
    tune_threshold,
)

# Validation exports
from .validation import make_holdout_split

# Utility exports
from .utils import ModelLoader, ModelSaver, plot_optimization_history

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",

    # Errors and settings
    "AutoXGBoostError",
    "InvalidArgumentError",
    "ModelNotFittedError",
    "UnsupportedTaskError",
    "AutoXGBoostSettings",

    # Tasks and measures
    "Task",
    "TaskType",
    "make_classif_task",
    "make_regr_task",
    "Prediction",
    "MEASURES",
    "Measure",
    "default_measure",
    "get_measure",

    # Models
    "XGBoostClassifierLearner",
    "XGBoostRegressorLearner",
    "build_base_learner",

    # Feature encoding
    "DummyEncoder",
    "ImpactEncoder",
    "partition_categorical_columns",

    # Tuning
    "AcquisitionFunction",
    "AutoXGBoostTuner",
    "AutoxgbResult",
    "MBOControl",
    "MBOResult",
    "ParameterSpace",
    "TuningStrategy",
    "autoxgb_param_set",
    "autoxgboost",
    "generate_design",
    "impact_encoding_param_set",
    "mbo",
    "scale_pos_weight_param_set",
    "tune_threshold",

    # Validation
    "make_holdout_split",

    # Utilities
    "ModelLoader",
    "ModelSaver",
    "plot_optimization_history",

    # Package functions
    "get_package_info",
    "check_dependencies",
    "setup_logging",
]


def get_package_info() -> Dict[str, Any]:
    """
    Get package information and metadata.

    Returns:
        Dict containing package info including version, platform and features.
    """
    info = {
        "name": "autoxgboost",
        "version": __version__,
        "description": "Automatic tuning of XGBoost with Bayesian optimization",
        "author": __author__,
        "license": __license__,
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "platform": sys.platform,
        "features": [
            "Bayesian optimization (scikit-optimize, Optuna)",
            "Early stopping on a holdout set",
            "Impact and dummy encoding of categorical features",
            "Decision threshold tuning",
            "Binary, multiclass and regression tasks",
        ],
    }

    return info


def check_dependencies() -> Dict[str, bool]:
    """
    Check if all required dependencies are available.

    Returns:
        Dict mapping dependency import names to availability status.
    """
    dependencies = {
        "xgboost": False,
        "sklearn": False,
        "skopt": False,
        "optuna": False,
        "scipy": False,
        "pandas": False,
        "numpy": False,
        "pydantic": False,
        "joblib": False,
        "loguru": False,
        "rich": False,
        "matplotlib": False,
    }

    for dep_name in dependencies:
        try:
            __import__(dep_name)
            dependencies[dep_name] = True
        except ImportError:
            dependencies[dep_name] = False

    return dependencies


def setup_logging(
    level: str = "INFO",
    format_type: str = "rich",
    log_file: Optional[str] = None,
) -> None:
    """
    Setup logging configuration for the package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Format type ('rich', 'simple', 'json')
        log_file: Also write plain records to this file
    """
    if format_type not in ("rich", "simple", "json"):
        raise InvalidArgumentError(
            f"Unknown log format '{format_type}', use 'rich', 'simple' or 'json'"
        )

    # Remove default handler
    logger.remove()

    if format_type == "rich":
        logger.add(
            sys.stdout,
            level=level,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                   "<level>{level: <8}</level> | "
                   "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                   "<level>{message}</level>",
            colorize=True,
        )
    elif format_type == "json":
        logger.add(
            sys.stdout,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
            serialize=True,
        )
    else:  # simple
        logger.add(
            sys.stdout,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            colorize=False,
        )

    if log_file:
        logger.add(
            log_file,
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
        )

    logger.debug(f"🚀 autoxgboost package initialized (v{__version__})")


# Initialize logging on import
setup_logging(level="INFO", format_type="rich")
