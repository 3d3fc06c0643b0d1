# モデル評価指標の計算モジュール
# 混同行列・正解率・適合率・再現率・F1・ROC-AUC を予測確率から計算する
# 分母はすべて下限を設けており、片方のクラスが存在しない場合も NaN ではなく 0 を返す
import logging
from dataclasses import asdict, dataclass

import numpy as np
import numpy.typing as npt

from attrition.const import DEFAULT_THRESHOLD, F1_EPSILON

logger = logging.getLogger(__name__)


# 混同行列（4つの件数の合計は評価したサンプル数に一致する）
@dataclass(frozen=True)
class ConfusionMatrix:
    tp: int
    tn: int
    fp: int
    fn: int

    @property
    def total(self) -> int:
        return self.tp + self.tn + self.fp + self.fn

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


# 評価結果一式
@dataclass(frozen=True)
class EvaluationResult:
    confusion_matrix: ConfusionMatrix
    accuracy: float
    precision: float
    recall: float
    f1: float
    auc: float
    threshold: float

    def to_dict(self) -> dict[str, float | dict[str, int]]:
        return {
            "accuracy": self.accuracy,
            "precision": self.precision,
            "recall": self.recall,
            "f1": self.f1,
            "auc": self.auc,
            "threshold": self.threshold,
            "confusion_matrix": self.confusion_matrix.to_dict(),
        }


# ROC 曲線上の1点
@dataclass(frozen=True)
class RocPoint:
    fpr: float
    tpr: float


def _as_labels(y_true: npt.ArrayLike) -> npt.NDArray[np.int64]:
    return np.asarray(y_true).reshape(-1).astype(np.int64)


# 予測確率は有限値のみ受け付ける（NaN は同率グループにまとめられないため）
def _as_probabilities(y_prob: npt.ArrayLike) -> npt.NDArray[np.float64]:
    prob = np.asarray(y_prob, dtype=np.float64).reshape(-1)
    if not np.all(np.isfinite(prob)):
        raise ValueError(f"Predicted probabilities must be finite. {int(np.sum(~np.isfinite(prob)))} non-finite values")
    return prob


def _check_lengths(y_true: np.ndarray, y_other: np.ndarray) -> None:
    if y_true.shape[0] != y_other.shape[0]:
        raise ValueError(f"Length mismatch between labels and predictions. {y_true.shape[0]=}, {y_other.shape[0]=}")


# 予測確率を閾値で二値化する関数（確率 >= 閾値 を 1 にする）
def binarize(y_prob: npt.ArrayLike, threshold: float = DEFAULT_THRESHOLD) -> npt.NDArray[np.int64]:
    return (_as_probabilities(y_prob) >= threshold).astype(np.int64)


# 正解ラベルと二値化済みの予測から混同行列を計算する関数
def confusion_matrix(y_true: npt.ArrayLike, y_pred: npt.ArrayLike) -> ConfusionMatrix:
    true = _as_labels(y_true)
    pred = _as_labels(y_pred)
    _check_lengths(true, pred)
    return ConfusionMatrix(
        tp=int(np.sum((pred == 1) & (true == 1))),
        tn=int(np.sum((pred == 0) & (true == 0))),
        fp=int(np.sum((pred == 1) & (true == 0))),
        fn=int(np.sum((pred == 0) & (true == 1))),
    )


# 混同行列から正解率・適合率・再現率・F1 を計算する関数
def classification_scores(cm: ConfusionMatrix) -> dict[str, float]:
    accuracy = (cm.tp + cm.tn) / max(1, cm.total)
    precision = cm.tp / max(1, cm.tp + cm.fp)
    recall = cm.tp / max(1, cm.tp + cm.fn)
    f1 = 2 * precision * recall / max(F1_EPSILON, precision + recall)
    return {"accuracy": accuracy, "precision": precision, "recall": recall, "f1": f1}


# ROC 曲線の点列を計算する関数
# 確率の降順に並べ、同じ確率のサンプルはまとめて数えてから1点を出す（同率を任意の順で刻まない）
# 先頭に (0, 0)、末尾に (1, 1) を加える
def roc_curve_points(y_true: npt.ArrayLike, y_prob: npt.ArrayLike) -> list[RocPoint]:
    true = _as_labels(y_true)
    prob = _as_probabilities(y_prob)
    _check_lengths(true, prob)

    n_positive = int(np.sum(true == 1))
    n_negative = len(true) - n_positive
    order = np.argsort(-prob, kind="stable")
    sorted_prob = prob[order]
    sorted_true = true[order]

    points = [RocPoint(fpr=0.0, tpr=0.0)]
    tp = fp = 0
    i = 0
    while i < len(sorted_prob):
        # 同じ確率のサンプルを一括で集計する
        j = i
        while j < len(sorted_prob) and sorted_prob[j] == sorted_prob[i]:
            if sorted_true[j] == 1:
                tp += 1
            else:
                fp += 1
            j += 1
        points.append(RocPoint(fpr=fp / max(1, n_negative), tpr=tp / max(1, n_positive)))
        i = j
    points.append(RocPoint(fpr=1.0, tpr=1.0))
    return points


# ROC 曲線下面積（AUC）を台形則で計算する関数
# 点列を fpr の昇順に並べて面積を足し合わせ、最後に [0, 1] に収める
def roc_auc(y_true: npt.ArrayLike, y_prob: npt.ArrayLike) -> float:
    points = sorted(roc_curve_points(y_true, y_prob), key=lambda point: point.fpr)
    auc = 0.0
    for previous, current in zip(points, points[1:]):
        auc += (current.fpr - previous.fpr) * (previous.tpr + current.tpr) / 2
    return min(1.0, max(0.0, auc))


# 評価指標一式を計算して EvaluationResult で返す関数
def calculate_metrics(
    y_true: npt.ArrayLike,
    y_prob: npt.ArrayLike,
    threshold: float = DEFAULT_THRESHOLD,
) -> EvaluationResult:
    cm = confusion_matrix(y_true, binarize(y_prob, threshold))
    scores = classification_scores(cm)
    auc = roc_auc(y_true, y_prob)
    logger.info(f"confusion matrix: {cm}, scores: {scores}, AUC: {auc}")
    return EvaluationResult(confusion_matrix=cm, auc=auc, threshold=threshold, **scores)
