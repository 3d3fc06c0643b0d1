# モデル設定の定義と取得関数を提供するモジュール
# 使用するモデルクラス・訓練パラメータ・分割方式・二値化の閾値を一元管理する
import logging
from dataclasses import dataclass, field, replace

from attrition.const import DEFAULT_THRESHOLD

from .models.base_model import BaseModel, TrainingConfig
from .models.lightgbm import LightGBMModel
from .models.mlp_classifier import MLPClassifierModel
from .split import SplitConfig, SplitMode

logger = logging.getLogger(__name__)


# モデル訓練に必要な全設定を保持するデータクラス
# モデルクラス・訓練パラメータ・データ分割方式を一つにまとめて扱う
@dataclass
class ModelConfig:
    name: str  # モデルの識別名（アーティファクトのディレクトリ名として使用）
    model_class: BaseModel  # 訓練・推論を行うモデルクラスのインスタンス
    training: TrainingConfig = field(default_factory=TrainingConfig)  # エポック数・バッチサイズ等
    split: SplitConfig = field(default_factory=SplitConfig)  # 訓練・評価データの分割方式
    threshold: float = DEFAULT_THRESHOLD  # 予測確率を二値化する閾値

    # コマンドライン引数などで一部の設定だけ差し替えたコピーを返すメソッド
    def override(
        self,
        training: dict | None = None,
        split: dict | None = None,
        threshold: float | None = None,
    ) -> "ModelConfig":
        return ModelConfig(
            name=self.name,
            model_class=self.model_class,
            training=replace(self.training, **(training or {})),
            split=replace(self.split, **(split or {})),
            threshold=self.threshold if threshold is None else threshold,
        )


# プロジェクトで使用する全モデルの設定リスト
model_configs = [
    # 多層パーセプトロンによる離職予測モデルの設定
    # 固定シードでシャッフルした上で 20% を評価データにする
    ModelConfig(
        name="mlp_attrition",
        model_class=MLPClassifierModel(args=dict(alpha=1e-4)),
        training=TrainingConfig(epochs=20, batch_size=32, learning_rate=1e-3, layer_width=64, layer_count=2),
        split=SplitConfig(mode=SplitMode.SHUFFLE, test_fraction=0.2),
    ),
    # 勤続年数順に並べた長さ4のウィンドウを入力にする時系列版の設定
    # 古い側を訓練・新しい側を評価にするため、シャッフル版とは汎化性能の意味が異なる
    ModelConfig(
        name="mlp_attrition_window",
        model_class=MLPClassifierModel(args=dict(alpha=1e-4)),
        training=TrainingConfig(epochs=20, batch_size=32, learning_rate=1e-3, layer_width=64, layer_count=2),
        split=SplitConfig(mode=SplitMode.CHRONOLOGICAL, test_fraction=0.2, seq_len=4),
    ),
    # LightGBM を使った離職予測モデルの設定
    ModelConfig(
        name="lightgbm_attrition",
        model_class=LightGBMModel(args=dict(num_leaves=31)),
        training=TrainingConfig(epochs=100, learning_rate=0.05),
        split=SplitConfig(mode=SplitMode.SHUFFLE, test_fraction=0.2),
    ),
]


# モデル名からモデル設定を取得する関数
# 存在しないモデル名が指定された場合は ValueError を発生させる
def get_model_config(model_name: str) -> ModelConfig:
    for model_config in model_configs:
        if model_config.name == model_name:
            return model_config
    raise ValueError(f"Invalid model name: {model_name}")
