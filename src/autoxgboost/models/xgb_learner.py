"""
XGBoost Learners with Holdout Early Stopping
============================================

scikit-learn compatible wrappers around ``xgb.XGBClassifier`` and
``xgb.XGBRegressor``. During tuning a learner receives the positions of the
early-stopping rows: it trains on the remaining rows, monitors the held-out
rows after every boosting round and stops once ``early_stopping_rounds``
rounds pass without improvement. The winning number of rounds is kept in
``best_iteration_``. Without early-stopping rows exactly ``nrounds`` rounds
are trained, which is how the final model is built.

Hyperparameters that are not constructor arguments (``learning_rate``,
``max_depth``, ...) are collected in ``xgb_params``, so
``set_params(max_depth=6)`` works like on the xgboost estimators.

Author: autoxgboost contributors
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
import xgboost as xgb
from loguru import logger
from sklearn.base import BaseEstimator, ClassifierMixin, RegressorMixin

from ..exceptions import InvalidArgumentError, ModelNotFittedError
from ..prediction import Threshold, apply_threshold
from ..tasks import column_levels


class Objective(Enum):
    """XGBoost objective functions used by the learners"""

    # Regression objectives
    SQUARED_ERROR = "reg:squarederror"

    # Classification objectives
    LOGISTIC = "binary:logistic"
    MULTIPROB = "multi:softprob"


# characters xgboost rejects in feature names
_FORBIDDEN_NAME_CHARS = {"[": "(", "]": ")", "<": "lt"}


def xgboost_feature_names(columns: Sequence[Any]) -> List[str]:
    """
    Map column names to names xgboost accepts.

    ``[``, ``]`` and ``<`` are replaced; a name that then clashes with an
    earlier one gets a numeric suffix. The mapping depends only on the
    column order, so training and prediction data map identically.
    """
    names: List[str] = []
    used = set()
    for col in columns:
        name = str(col)
        for char, replacement in _FORBIDDEN_NAME_CHARS.items():
            name = name.replace(char, replacement)
        candidate, k = name, 1
        while candidate in used:
            candidate = f"{name}_{k}"
            k += 1
        used.add(candidate)
        names.append(candidate)
    return names


class BaseXGBoostLearner(BaseEstimator, ABC):
    """
    Base class for the XGBoost learners.

    Subclasses list every constructor argument explicitly so that
    ``get_params``/``clone`` work.
    """

    @abstractmethod
    def _get_default_objective(self) -> str:
        """Objective used when none is given"""

    @abstractmethod
    def _get_default_eval_metric(self) -> str:
        """Metric monitored for early stopping when none is given"""

    @abstractmethod
    def _model_class(self) -> type:
        """xgboost estimator class"""

    @abstractmethod
    def _encode_target(self, y: Any) -> np.ndarray:
        """Target as expected by xgboost"""

    def set_params(self, **params: Any) -> "BaseXGBoostLearner":
        """Set constructor arguments; any other key becomes an xgboost parameter."""
        own = self.get_params(deep=False)
        booster_params = dict(self.xgb_params or {})
        if "xgb_params" in params:
            booster_params.update(params.pop("xgb_params") or {})
        for key, value in params.items():
            if key in own:
                setattr(self, key, value)
            else:
                booster_params[key] = value
        self.xgb_params = booster_params
        return self

    def _prepare_objective(self) -> str:
        if self.objective is None:
            return self._get_default_objective()
        if isinstance(self.objective, Objective):
            return self.objective.value
        return self.objective

    def _check_data(self, X: Union[pd.DataFrame, np.ndarray]) -> pd.DataFrame:
        if isinstance(X, np.ndarray):
            X = pd.DataFrame(X, columns=[f"feature_{i}" for i in range(X.shape[1])])
        if not isinstance(X, pd.DataFrame):
            raise InvalidArgumentError(f"X must be a DataFrame or array, got {type(X).__name__}")
        non_numeric = [
            col for col in X.columns
            if not (pd.api.types.is_numeric_dtype(X[col]) or pd.api.types.is_bool_dtype(X[col]))
        ]
        if non_numeric:
            raise InvalidArgumentError(
                f"Columns must be numeric after encoding, got non-numeric {non_numeric}"
            )
        return X

    def _prepare_data(self, X: Union[pd.DataFrame, np.ndarray]) -> pd.DataFrame:
        """Numeric frame with column names xgboost accepts"""
        X = self._check_data(X)
        return X.set_axis(xgboost_feature_names(X.columns), axis=1)

    def _create_model(self, early_stopping: bool) -> xgb.XGBModel:
        """Create the xgboost estimator"""
        params: Dict[str, Any] = dict(self.xgb_params or {})
        params.update(
            n_estimators=int(self.nrounds),
            objective=self._prepare_objective(),
            eval_metric=self.eval_metric or self._get_default_eval_metric(),
            n_jobs=self.nthread,
            random_state=self.random_state,
            verbosity=0,
        )
        if early_stopping:
            params["early_stopping_rounds"] = int(self.early_stopping_rounds)
        return self._model_class()(**params)

    def fit(self, X: Union[pd.DataFrame, np.ndarray], y: Any) -> "BaseXGBoostLearner":
        """
        Train the booster.

        Args:
            X: Numeric feature matrix
            y: Target
        """
        X = self._check_data(X)
        self.feature_names_: List[str] = list(X.columns)
        X = self._prepare_data(X)
        y_enc = self._encode_target(y)

        if self.early_stopping_index is not None:
            if self.early_stopping_rounds is None:
                raise InvalidArgumentError(
                    "early_stopping_rounds is required when early_stopping_index is set"
                )
            holdout = np.zeros(len(X), dtype=bool)
            holdout[np.asarray(self.early_stopping_index, dtype=int)] = True
            if holdout.all() or not holdout.any():
                raise InvalidArgumentError("Early-stopping rows must be a proper subset of the data")

            model = self._create_model(early_stopping=True)
            model.fit(
                X.iloc[~holdout], y_enc[~holdout],
                eval_set=[(X.iloc[holdout], y_enc[holdout])],
                verbose=False,
            )
            self.best_iteration_ = int(model.best_iteration) + 1
            self.best_score_ = float(model.best_score)
        else:
            model = self._create_model(early_stopping=False)
            model.fit(X, y_enc, verbose=False)
            self.best_iteration_ = int(self.nrounds)
            self.best_score_ = None

        self.model_ = model
        logger.debug(f"🌲 {type(self).__name__} trained with {self.best_iteration_} round(s)")

        return self

    def _check_fitted(self):
        if getattr(self, "model_", None) is None:
            raise ModelNotFittedError(f"{type(self).__name__} is not fitted. Call fit() first.")


class XGBoostClassifierLearner(ClassifierMixin, BaseXGBoostLearner):
    """
    XGBoost classifier over a fixed class order.

    Args:
        objective: XGBoost objective; binary:logistic or multi:softprob by default
        eval_metric: Early-stopping metric; error or merror by default
        nrounds: Boosting rounds (upper bound when early stopping)
        early_stopping_rounds: Patience of early stopping
        early_stopping_index: Positions of the rows used for early stopping
        nthread: Threads used by xgboost, None lets xgboost decide
        random_state: Seed of the booster
        xgb_params: Further xgboost parameters
        classes: Class levels, positive class last; derived from y if omitted
        predict_type: "response" or "prob"
        threshold: Decision threshold(s) applied in ``predict``
    """

    def __init__(
        self,
        objective: Optional[Union[str, Objective]] = None,
        eval_metric: Optional[str] = None,
        nrounds: int = 10 ** 6,
        early_stopping_rounds: Optional[int] = None,
        early_stopping_index: Optional[Sequence[int]] = None,
        nthread: Optional[int] = None,
        random_state: Optional[int] = None,
        xgb_params: Optional[Dict[str, Any]] = None,
        classes: Optional[List[Any]] = None,
        predict_type: str = "response",
        threshold: Optional[Threshold] = None,
    ):
        self.objective = objective
        self.eval_metric = eval_metric
        self.nrounds = nrounds
        self.early_stopping_rounds = early_stopping_rounds
        self.early_stopping_index = early_stopping_index
        self.nthread = nthread
        self.random_state = random_state
        self.xgb_params = xgb_params
        self.classes = classes
        self.predict_type = predict_type
        self.threshold = threshold

    def _n_classes(self) -> int:
        return len(self.classes_)

    def _get_default_objective(self) -> str:
        return Objective.LOGISTIC.value if self._n_classes() == 2 else Objective.MULTIPROB.value

    def _get_default_eval_metric(self) -> str:
        return "error" if self._n_classes() == 2 else "merror"

    def _model_class(self) -> type:
        return xgb.XGBClassifier

    def _encode_target(self, y: Any) -> np.ndarray:
        y = pd.Series(np.asarray(y, dtype=object))
        self.classes_ = (
            list(self.classes) if self.classes is not None else column_levels(y)
        )
        codes = y.map({cls: i for i, cls in enumerate(self.classes_)})
        if codes.isna().any():
            unknown = sorted(set(y[codes.isna()]), key=str)
            raise InvalidArgumentError(f"Unknown class label(s) in target: {unknown}")
        return codes.to_numpy(dtype=int)

    def predict_proba(self, X: Union[pd.DataFrame, np.ndarray]) -> np.ndarray:
        """Class probabilities in the order of ``classes_``"""
        self._check_fitted()
        return self.model_.predict_proba(self._prepare_data(X))

    def predict(self, X: Union[pd.DataFrame, np.ndarray]) -> np.ndarray:
        """Class labels, using the decision threshold if one is set"""
        return apply_threshold(self.predict_proba(X), self.classes_, self.threshold)


class XGBoostRegressorLearner(RegressorMixin, BaseXGBoostLearner):
    """
    XGBoost regressor.

    Args:
        objective: XGBoost objective; reg:squarederror by default
        eval_metric: Early-stopping metric; rmse by default
        nrounds: Boosting rounds (upper bound when early stopping)
        early_stopping_rounds: Patience of early stopping
        early_stopping_index: Positions of the rows used for early stopping
        nthread: Threads used by xgboost, None lets xgboost decide
        random_state: Seed of the booster
        xgb_params: Further xgboost parameters
    """

    def __init__(
        self,
        objective: Optional[Union[str, Objective]] = None,
        eval_metric: Optional[str] = None,
        nrounds: int = 10 ** 6,
        early_stopping_rounds: Optional[int] = None,
        early_stopping_index: Optional[Sequence[int]] = None,
        nthread: Optional[int] = None,
        random_state: Optional[int] = None,
        xgb_params: Optional[Dict[str, Any]] = None,
    ):
        self.objective = objective
        self.eval_metric = eval_metric
        self.nrounds = nrounds
        self.early_stopping_rounds = early_stopping_rounds
        self.early_stopping_index = early_stopping_index
        self.nthread = nthread
        self.random_state = random_state
        self.xgb_params = xgb_params

    def _get_default_objective(self) -> str:
        return Objective.SQUARED_ERROR.value

    def _get_default_eval_metric(self) -> str:
        return "rmse"

    def _model_class(self) -> type:
        return xgb.XGBRegressor

    def _encode_target(self, y: Any) -> np.ndarray:
        return np.asarray(y, dtype=float)

    def predict(self, X: Union[pd.DataFrame, np.ndarray]) -> np.ndarray:
        self._check_fitted()
        return self.model_.predict(self._prepare_data(X))
