# 特徴量の標準化（平均0・標準偏差1）を行うモジュール
# 統計量は訓練データだけから計算し、同じ値を訓練・評価の両方に適用する（評価データで再計算しない）
import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from attrition.const import SCALER_EPSILON
from attrition.exceptions import StateError

logger = logging.getLogger(__name__)


# 訓練データから計算した次元ごとの平均と標準偏差
@dataclass(frozen=True)
class ScalerState:
    mean: tuple[float, ...]
    std: tuple[float, ...]

    @property
    def dimension(self) -> int:
        return len(self.mean)

    # JSON に書き出せる形式に変換する
    def to_dict(self) -> dict[str, list[float]]:
        return {"mean": list(self.mean), "std": list(self.std)}


# 訓練データの行列 [N, D] から母平均と母標準偏差を計算する関数
# std = sqrt(max(ε, E[x²] - E[x]²)) とし、定数列でもゼロ除算にならないようにする
def fit_scaler(train_features: npt.ArrayLike, epsilon: float = SCALER_EPSILON) -> ScalerState:
    x = np.asarray(train_features, dtype=np.float64)
    if x.ndim != 2 or x.shape[0] == 0:
        raise StateError(f"Scaler needs a non-empty 2-D training matrix. shape={x.shape}")

    mean = x.mean(axis=0)
    variance = (x * x).mean(axis=0) - mean * mean
    std = np.sqrt(np.maximum(epsilon, variance))
    logger.info(f"Fitted scaler. n={x.shape[0]}, dimension={x.shape[1]}")
    return ScalerState(mean=tuple(mean.tolist()), std=tuple(std.tolist()))


# 学習済みの統計量で (x - mean) / std を要素ごとに適用する関数
# 最後の軸を特徴量次元として扱うため、[N, D] にも [N, S, D] にも適用できる
def apply_scaler(features: npt.ArrayLike, state: ScalerState | None) -> npt.NDArray[np.float64]:
    if state is None:
        raise StateError("Scaler is not fitted. Call fit_scaler on the training partition first.")
    x = np.asarray(features, dtype=np.float64)
    if x.shape[-1] != state.dimension:
        raise ValueError(f"Feature dimension mismatch. {x.shape[-1]=}, {state.dimension=}")
    return (x - np.asarray(state.mean)) / np.asarray(state.std)
