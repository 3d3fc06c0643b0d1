# 全モデルクラスの基底となる抽象クラスと、訓練設定・訓練履歴のデータクラスを定義するモジュール
# パイプライン側はモデルをブラックボックスとして扱い、fit / predict_proba / save / from_pretrained だけを呼ぶ
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from pathlib import Path

import numpy as np
import numpy.typing as npt

# 訓練設定の下限値（元の UI と同じく、範囲外の値は例外にせず丸める）
MIN_LAYER_WIDTH = 8


# モデルの訓練設定を保持するデータクラス
@dataclass(frozen=True)
class TrainingConfig:
    epochs: int = 20  # 訓練データを何周するか（LightGBM ではブースティングの反復回数）
    batch_size: int = 32  # ミニバッチのサイズ
    learning_rate: float = 1e-3  # 学習率
    layer_width: int = 64  # 隠れ層のユニット数（8 以上）
    layer_count: int = 2  # 隠れ層の数（1 以上）

    def __post_init__(self) -> None:
        object.__setattr__(self, "epochs", max(1, int(self.epochs)))
        object.__setattr__(self, "batch_size", max(1, int(self.batch_size)))
        object.__setattr__(self, "layer_width", max(MIN_LAYER_WIDTH, int(self.layer_width)))
        object.__setattr__(self, "layer_count", max(1, int(self.layer_count)))
        if not self.learning_rate > 0:
            object.__setattr__(self, "learning_rate", 1e-3)

    def to_dict(self) -> dict[str, int | float]:
        return asdict(self)


# エポックごとの訓練損失と訓練正解率
@dataclass
class TrainingHistory:
    loss: list[float] = field(default_factory=list)
    accuracy: list[float] = field(default_factory=list)

    @property
    def epochs(self) -> int:
        return len(self.loss)

    def append(self, loss: float, accuracy: float) -> None:
        self.loss.append(float(loss))
        self.accuracy.append(float(accuracy))

    def to_dict(self) -> dict[str, list[float]]:
        return {"loss": list(self.loss), "accuracy": list(self.accuracy)}


# [N, S, D] のウィンドウ入力を [N, S * D] に平坦化する関数（[N, D] はそのまま返す）
def flatten_features(features: npt.ArrayLike) -> npt.NDArray[np.float64]:
    x = np.asarray(features, dtype=np.float64)
    if x.ndim == 3:
        return x.reshape(x.shape[0], -1)
    if x.ndim != 2:
        raise ValueError(f"Features must be 2-D or 3-D. shape={x.shape}")
    return x


# 全モデルクラスが継承すべき抽象基底クラス
# このクラスを継承することで、train.py がモデルの種類を意識せずに統一インターフェースで操作できる
class BaseModel(ABC):
    # モデルを訓練してエポックごとの履歴を返す抽象メソッド
    @abstractmethod
    def fit(
        self,
        features: npt.ArrayLike,
        labels: npt.ArrayLike,
        config: TrainingConfig,
    ) -> TrainingHistory:
        raise NotImplementedError

    # 正例（離職）である確率を [N] の配列で返す抽象メソッド
    @abstractmethod
    def predict_proba(self, features: npt.ArrayLike) -> npt.NDArray[np.float64]:
        raise NotImplementedError

    # モデルをローカルファイルに保存する抽象メソッド
    @abstractmethod
    def save(self, file_path: Path) -> None:
        raise NotImplementedError

    # 保存先のキー（ローカルパス）からモデルをロードしてインスタンスを返すクラスメソッド
    # 継承クラスでオーバーライドして具体的な実装を提供する必要がある
    @classmethod
    def from_pretrained(cls, key: str) -> "BaseModel":
        raise NotImplementedError
