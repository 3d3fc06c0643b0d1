from .histgram import plot_histgram
from .metrics import (
    ConfusionMatrix,
    EvaluationResult,
    RocPoint,
    binarize,
    calculate_metrics,
    classification_scores,
    confusion_matrix,
    roc_auc,
    roc_curve_points,
)
from .roc_auc_curve import plot_roc_auc_curve
from .training_curve import plot_training_history

__all__ = [
    "ConfusionMatrix",
    "EvaluationResult",
    "RocPoint",
    "binarize",
    "calculate_metrics",
    "classification_scores",
    "confusion_matrix",
    "plot_histgram",
    "plot_roc_auc_curve",
    "plot_training_history",
    "roc_auc",
    "roc_curve_points",
]
