"""
Model Utilities
===============

Saving and loading tuned models. A saved result is a directory holding the
pickled model, the tuning summary as JSON and the optimization path as CSV.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import joblib
import pandas as pd
from loguru import logger

MODEL_FILE = "model.pkl"
METADATA_FILE = "metadata.json"
OPT_PATH_FILE = "optimization_path.csv"


class ModelSaver:
    """Utility for saving tuned models"""

    def save_model(
        self,
        model: Any,
        path: Union[str, Path],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """Save model with metadata"""

        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)

        joblib.dump(model, path / MODEL_FILE)

        if metadata:
            with open(path / METADATA_FILE, "w") as f:
                json.dump(metadata, f, indent=2, default=str)

        logger.info(f"💾 Model saved to {path}")
        return path

    def save_result(self, result: Any, path: Union[str, Path]) -> Path:
        """
        Save an ``AutoxgbResult``.

        The final model is stored when it was built, the unfitted final
        learner otherwise.
        """
        model = result.final_model if result.final_model is not None else result.final_learner
        path = self.save_model(model, path, metadata=result.to_dict())
        result.optim_result.op_path.to_csv(path / OPT_PATH_FILE, index=False)
        return path


class ModelLoader:
    """Utility for loading tuned models"""

    def load_model(self, path: Union[str, Path]) -> Any:
        """Load model from path"""

        model_path = Path(path) / MODEL_FILE

        if not model_path.exists():
            raise FileNotFoundError(f"Model file not found: {model_path}")

        model = joblib.load(model_path)
        logger.info(f"📂 Model loaded from {path}")

        return model

    def load_metadata(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load model metadata, empty if none was saved"""

        metadata_path = Path(path) / METADATA_FILE

        if not metadata_path.exists():
            return {}

        with open(metadata_path, "r") as f:
            return json.load(f)

    def load_optimization_path(self, path: Union[str, Path]) -> pd.DataFrame:
        opt_path = Path(path) / OPT_PATH_FILE
        if not opt_path.exists():
            raise FileNotFoundError(f"Optimization path not found: {opt_path}")
        return pd.read_csv(opt_path)
