from .base_model import BaseModel, TrainingConfig, TrainingHistory, flatten_features
from .lightgbm import LightGBMModel
from .mlp_classifier import MLPClassifierModel

__all__ = [
    "BaseModel",
    "LightGBMModel",
    "MLPClassifierModel",
    "TrainingConfig",
    "TrainingHistory",
    "flatten_features",
]
