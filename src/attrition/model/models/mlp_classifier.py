# 多層パーセプトロン（scikit-learn の MLPClassifier）を使ったモデルクラスの実装
# 1エポックごとに partial_fit を呼び、エポックごとの損失・正解率を訓練履歴として記録する
import logging
import pickle
from pathlib import Path

import numpy as np
import numpy.typing as npt
from sklearn.neural_network import MLPClassifier

from attrition.exceptions import StateError

from .base_model import BaseModel, TrainingConfig, TrainingHistory, flatten_features

logger = logging.getLogger(__name__)


# MLPClassifier を使った離職予測モデルのラッパークラス
# ウィンドウ入力 [N, S, D] は [N, S * D] に平坦化してから渡す
class MLPClassifierModel(BaseModel):
    def __init__(
        self,
        model: MLPClassifier | None = None,  # 訓練済みの MLPClassifier インスタンス（未訓練時は None）
        args: dict | None = None,  # MLPClassifier の追加ハイパーパラメータ辞書
    ) -> None:
        self.model = model
        self.args = args if args else {}

    # モデルを訓練するメソッド
    # 隠れ層は (layer_width,) * layer_count とし、adam で1エポックずつ学習する
    def fit(
        self,
        features: npt.ArrayLike,
        labels: npt.ArrayLike,
        config: TrainingConfig,
    ) -> TrainingHistory:
        x = flatten_features(features)
        y = np.asarray(labels, dtype=np.int64).reshape(-1)
        model = MLPClassifier(
            hidden_layer_sizes=(config.layer_width,) * config.layer_count,
            solver="adam",
            learning_rate_init=config.learning_rate,
            batch_size=min(config.batch_size, len(x)),
            shuffle=True,
            random_state=42,
            **self.args,
        )

        history = TrainingHistory()
        for epoch in range(config.epochs):
            # 初回の partial_fit でクラスを明示しておく（訓練データが片方のクラスしかない場合に備える）
            model.partial_fit(x, y, classes=np.array([0, 1]))
            history.append(loss=model.loss_, accuracy=model.score(x, y))
            logger.info(f"Epoch {epoch + 1}/{config.epochs} loss={history.loss[-1]:.4f} acc={history.accuracy[-1]:.4f}")

        self.model = model
        return history

    # 離職確率を予測して NumPy 配列で返すメソッド
    def predict_proba(self, features: npt.ArrayLike) -> npt.NDArray[np.float64]:
        if self.model is None:
            raise StateError("Model is not fitted.")
        # predict_proba の出力は [在籍確率, 離職確率] の2列なので、離職確率（[:,1]）を返す
        return self.model.predict_proba(flatten_features(features))[:, 1]

    # モデルを pickle 形式でローカルファイルに保存するメソッド
    def save(self, file_path: Path) -> None:
        logger.info(f"Save model file at {file_path}.")
        if self.model is None:
            raise StateError("Model is not fitted.")

        with open(file_path, "wb") as f:
            pickle.dump(self.model, f)

    # ローカルの pickle ファイルからモデルをロードするクラスメソッド
    @classmethod
    def from_pretrained(cls, key: str) -> "MLPClassifierModel":
        logger.info(f"Loading model from {key}")
        with open(key, "rb") as f:
            model = pickle.load(f)
        return cls(model)
