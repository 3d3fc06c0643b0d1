# 組み立て済み特徴量テーブルのスキーマ定義（pandera を使ったデータバリデーション）
# エンコード・組み立ての結果が、すべて有限の float 列と 0/1 のラベル列になっていることを検証する
from typing import Iterable

import numpy as np
import pandas as pd
from pandera import Check, Column, DataFrameSchema, Index

from attrition.const import FEATURE_FRAME_LABEL


# feature_order に対応する特徴量 DataFrame のスキーマを生成する関数
# 列構成は feature_order + ラベル列に固定し、定義外の列が含まれる場合はエラーにする
def build_feature_frame_schema(feature_order: Iterable[str]) -> DataFrameSchema:
    columns = {
        name: Column(float, checks=Check(lambda s: np.isfinite(s), error="non-finite feature"))  # 有限の実数値
        for name in feature_order
    }
    columns[FEATURE_FRAME_LABEL] = Column(int, checks=Check.isin([0, 1]))  # 離職ラベル（0: 在籍, 1: 離職）
    return DataFrameSchema(
        name="feature_frame",
        columns=columns,
        index=Index(int),  # 整数インデックス
        strict=True,  # 定義外のカラムが含まれる場合はエラーにする
        ordered=True,  # 列の並び順も feature_order に一致させる
    )


# 特徴量行列とラベルから検証用の DataFrame を作る関数
def to_feature_frame(features: np.ndarray, labels: np.ndarray, feature_order: list[str]) -> pd.DataFrame:
    df = pd.DataFrame(np.asarray(features, dtype=np.float64), columns=feature_order)
    df[FEATURE_FRAME_LABEL] = np.asarray(labels, dtype=np.int64)
    return df
