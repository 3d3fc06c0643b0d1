# ROC-AUC 曲線を描画するモジュール
# 偽陽性率（FPR）と真陽性率（TPR）のトレードオフを可視化し、モデルの識別能力を評価する
import matplotlib.pyplot as plt
import numpy.typing as npt
from matplotlib.figure import Figure

from .metrics import roc_auc, roc_curve_points


# ROC 曲線を描画して Figure オブジェクトを返す関数
# 点列は同率の確率をまとめた roc_curve_points をそのまま使う
def plot_roc_auc_curve(y_true: npt.ArrayLike, y_prob: npt.ArrayLike) -> Figure:
    points = roc_curve_points(y_true, y_prob)
    auc = roc_auc(y_true, y_prob)

    fig = plt.figure(figsize=(6, 6))
    plt.plot([p.fpr for p in points], [p.tpr for p in points], label=f"Model (AUC={auc:.4f})")
    # ランダム予測のベースライン（対角線）を破線で描画
    plt.plot([0, 1], [0, 1], "k--", label="Random")
    plt.xlabel("False Positive Rate")
    plt.ylabel("True Positive Rate (recall)")
    plt.title("ROC Curve")
    plt.legend()

    return fig
