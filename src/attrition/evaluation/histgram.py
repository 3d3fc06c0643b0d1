# 予測値の分布ヒストグラムを描画するモジュール
# 離職（正例）と在籍（負例）ごとに予測確率の分布を可視化し、閾値の妥当性を確認する
import matplotlib.pyplot as plt
import numpy as np
import numpy.typing as npt
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure


# 正例・負例それぞれの予測値分布をヒストグラムで描画して Figure オブジェクトを返す関数
def plot_histgram(y_true: npt.ArrayLike, y_prob: npt.ArrayLike, threshold: float | None = None) -> Figure:
    fig = plt.figure(figsize=(10, 6))
    df_hist = pd.DataFrame(
        {"y_prob": np.asarray(y_prob, dtype=float).reshape(-1), "y_true": np.asarray(y_true).reshape(-1).astype(int)}
    )
    # hue="y_true" により正例（1）と負例（0）を色分けしてヒストグラムを重ね描きする
    sns.histplot(data=df_hist, x="y_prob", hue="y_true", bins=50, binrange=(0, 1))
    if threshold is not None:
        plt.axvline(threshold, color="k", linestyle=":")
    plt.title("Distribution of prediction value")

    return fig
