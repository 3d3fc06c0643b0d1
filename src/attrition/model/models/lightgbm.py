# LightGBM を使ったモデルクラスの実装
# BaseModel を継承し、勾配ブースティング木で離職確率を予測する（ウィンドウ入力は平坦化して扱う）
import logging
from pathlib import Path

import lightgbm as lgb
import numpy as np
import numpy.typing as npt

from attrition.exceptions import StateError

from .base_model import BaseModel, TrainingConfig, TrainingHistory, flatten_features

logger = logging.getLogger(__name__)


# LightGBM モデルのラッパークラス
# epochs をブースティングの反復回数として扱い、反復ごとの訓練損失・正解率を履歴に残す
class LightGBMModel(BaseModel):
    def __init__(
        self,
        model: lgb.Booster | None = None,  # 訓練済みの Booster インスタンス（未訓練時は None）
        args: dict | None = None,  # LightGBM のハイパーパラメータ辞書
    ) -> None:
        self.model = model
        if args is None:
            args = {}
        # 二値分類のため objective と評価指標を強制的に上書きする
        self.args = args | {"objective": "binary", "metric": ["binary_logloss", "binary_error"], "verbose": -1}

    # LightGBM モデルを訓練するメソッド
    def fit(
        self,
        features: npt.ArrayLike,
        labels: npt.ArrayLike,
        config: TrainingConfig,
    ) -> TrainingHistory:
        x = flatten_features(features)
        y = np.asarray(labels, dtype=np.int64).reshape(-1)
        params = self.args | {"learning_rate": config.learning_rate}

        # LightGBM 用のデータセット形式に変換する
        train_data = lgb.Dataset(x, label=y)
        # 訓練データ自身を評価対象にして、反復ごとの損失と誤り率を記録する
        evals_result: dict[str, dict[str, list[float]]] = {}
        model = lgb.train(
            params,
            train_data,
            num_boost_round=config.epochs,
            valid_sets=[train_data],
            valid_names=["train"],
            callbacks=[lgb.record_evaluation(evals_result)],
        )
        self.model = model

        history = TrainingHistory()
        for loss, error in zip(evals_result["train"]["binary_logloss"], evals_result["train"]["binary_error"]):
            history.append(loss=loss, accuracy=1.0 - error)
        logger.info(f"Finished LightGBM training. {history.epochs=}, loss={history.loss[-1]:.4f}")
        return history

    # 離職確率を予測して NumPy 配列で返すメソッド
    def predict_proba(self, features: npt.ArrayLike) -> npt.NDArray[np.float64]:
        if self.model is None:
            raise StateError("Model is not fitted.")
        # LightGBM の predict は二値分類では直接確率を返す
        return np.asarray(self.model.predict(flatten_features(features)), dtype=np.float64)

    # モデルを LightGBM 形式（テキスト形式）のファイルに保存するメソッド
    def save(self, file_path: Path) -> None:
        logger.info(f"Save model file at {file_path}.")
        if self.model is None:
            raise StateError("Model is not fitted.")
        self.model.save_model(str(file_path))

    # ローカルのモデルファイルから Booster を読み込んでインスタンスを返すクラスメソッド
    @classmethod
    def from_pretrained(cls, key: str) -> "LightGBMModel":
        logger.info(f"Loading model from {key}")
        return cls(lgb.Booster(model_file=key))
