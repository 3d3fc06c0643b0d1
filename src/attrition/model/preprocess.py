# 特徴量ベクトルの組み立てと、データセット準備パイプラインを提供するモジュール
# 生テキスト -> パース -> スキーマフィルタ -> エンコーダ学習 -> 組み立て -> 分割 -> 標準化 を順に実行する
import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import numpy.typing as npt

from attrition.const import POSITIVE_LABEL
from attrition.data_loader import Record, parse_csv
from attrition.data_validator import build_feature_frame_schema, to_feature_frame
from attrition.exceptions import ConfigError, StateError

from .encoder import FittedEncoding, fit_category_encodings
from .scaler import ScalerState, apply_scaler, fit_scaler
from .schema import (
    ColumnKind,
    Schema,
    SchemaConfig,
    filter_records,
    get_categorical_value,
    get_label_value,
    get_numeric_value,
    parse_numeric_or_default,
)
from .split import (
    SplitConfig,
    SplitIndices,
    SplitMode,
    sort_chronologically,
    split_chronological,
    split_shuffled,
    stack_windows,
)

logger = logging.getLogger(__name__)

# ラベル列の生文字列から 0/1 への固定マッピング（ここにない値はすべて 0）
LABEL_MAPPING = {POSITIVE_LABEL: 1}


# ラベル列の生文字列を 0/1 に変換する関数（欠損も含め "Yes" 以外は負例）
def encode_label(raw: str | None) -> int:
    return LABEL_MAPPING.get(raw or "", 0)


# 1レコードを特徴量ベクトルとラベルに変換する関数
# 数値列（スキーマ順）の後に、各カテゴリ列の one-hot ブロック（スキーマ順）を連結する
def assemble_record(
    record: Record,
    encoding: FittedEncoding | None,
) -> tuple[npt.NDArray[np.float64], int]:
    if encoding is None:
        raise StateError("Category encodings are not fitted. Call fit_category_encodings first.")
    schema = encoding.schema

    vector = np.zeros(encoding.dimension, dtype=np.float64)
    for i, name in enumerate(schema.numeric_columns):
        # 欠損・不正値は 0.0 で補完する（エラーにはしない）
        vector[i] = parse_numeric_or_default(get_numeric_value(record, name))

    offset = len(schema.numeric_columns)
    for column in schema.categorical_columns:
        if column not in encoding:
            raise StateError(f"No fitted encoding for categorical column: {column}")
        category_encoding = encoding[column]
        index = category_encoding.lookup(get_categorical_value(record, column))
        # 学習時に見ていないカテゴリ値はすべて 0 のブロックのままにする
        if index is not None:
            vector[offset + index] = 1.0
        offset += category_encoding.size

    return vector, encode_label(get_label_value(record, schema))


# レコード列をまとめて特徴量行列 [n, D] とラベル [n] に変換する関数
def assemble_records(
    records: Iterable[Record],
    encoding: FittedEncoding | None,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int64]]:
    if encoding is None:
        raise StateError("Category encodings are not fitted. Call fit_category_encodings first.")
    vectors: list[npt.NDArray[np.float64]] = []
    labels: list[int] = []
    for record in records:
        vector, label = assemble_record(record, encoding)
        vectors.append(vector)
        labels.append(label)

    features = np.vstack(vectors) if vectors else np.empty((0, encoding.dimension), dtype=np.float64)
    return features, np.asarray(labels, dtype=np.int64)


# feature_order に従って特徴量ベクトルを列名 -> 値の形に戻す関数
# 数値列は値をそのまま、カテゴリ列は値が 1 の one-hot 位置のカテゴリ値（なければ None）を返す
def decode_vector(vector: npt.ArrayLike, encoding: FittedEncoding) -> dict[str, float | str | None]:
    values = np.asarray(vector, dtype=np.float64)
    schema = encoding.schema
    decoded: dict[str, float | str | None] = {
        name: float(values[i]) for i, name in enumerate(schema.numeric_columns)
    }
    offset = len(schema.numeric_columns)
    for category_encoding in encoding.encodings:
        block = values[offset : offset + category_encoding.size]
        active = np.flatnonzero(block == 1.0)
        decoded[category_encoding.column] = category_encoding.categories[active[0]] if len(active) else None
        offset += category_encoding.size
    return decoded


# モデルに渡す訓練・評価データ一式を保持するデータクラス
# x_* はシャッフルモードでは [N, D]、時系列モードでは [N, S, D]
@dataclass(frozen=True)
class PreparedDataset:
    x_train: npt.NDArray[np.float64]
    y_train: npt.NDArray[np.int64]
    x_eval: npt.NDArray[np.float64]
    y_eval: npt.NDArray[np.int64]
    schema: Schema
    encoding: FittedEncoding
    scaler_state: ScalerState
    split: SplitIndices
    split_config: SplitConfig
    records: tuple[Record, ...]

    @property
    def feature_order(self) -> list[str]:
        return self.encoding.feature_order

    # モデルの入力形状 (timesteps, features) を返すプロパティ（フラット形式は timesteps=1）
    @property
    def input_shape(self) -> tuple[int, int]:
        if self.x_train.ndim == 3:
            return self.x_train.shape[1], self.x_train.shape[2]
        return 1, self.x_train.shape[1]


# レコード列からデータセットを準備する関数
# エンコーダは全レコードで学習し、標準化の統計量は訓練パーティションだけで学習する
def prepare_records(
    schema: Schema,
    records: tuple[Record, ...],
    split_config: SplitConfig,
) -> PreparedDataset:
    logger.info(f"Start prepare dataset {len(records)=}, {split_config=}")

    # カテゴリエンコーディングは読み込んだ全レコードから一度だけ学習する
    encoding = fit_category_encodings(records, schema)

    # 時系列モードでは組み立て前に並び順キーでソートしておく
    if split_config.mode == SplitMode.CHRONOLOGICAL:
        for column in (split_config.order_column, split_config.tie_break_column):
            if column is not None and schema.kind_of(column) != ColumnKind.NUMERIC:
                raise ConfigError(f"Ordering column must be a numeric schema column: {column}")
        order = sort_chronologically(records, split_config.order_column, split_config.tie_break_column)
        records = tuple(records[i] for i in order)

    features, labels = assemble_records(records, encoding)
    # 組み立て結果が有限の float と 0/1 ラベルだけで構成されていることを検証する
    build_feature_frame_schema(encoding.feature_order).validate(to_feature_frame(features, labels, encoding.feature_order))

    if split_config.mode == SplitMode.SHUFFLE:
        split = split_shuffled(len(features), split_config.test_fraction, split_config.seed)
        train_rows = np.asarray(split.train, dtype=np.int64)
        # 標準化の統計量は訓練パーティションのみで学習する
        scaler_state = fit_scaler(features[train_rows])
        x_all = apply_scaler(features, scaler_state)
        x_train, y_train = x_all[train_rows], labels[train_rows]
        eval_rows = np.asarray(split.eval, dtype=np.int64)
        x_eval, y_eval = x_all[eval_rows], labels[eval_rows]
    else:
        seq_len = split_config.seq_len
        n_windows = max(0, len(features) - seq_len + 1)
        split = split_chronological(n_windows, split_config.test_fraction)
        # 訓練ウィンドウが覆う行（先頭から n_train + S - 1 行）だけで統計量を学習する
        scaler_state = fit_scaler(features[: split.n_train + seq_len - 1])
        x_windows, y_windows = stack_windows(apply_scaler(features, scaler_state), labels, seq_len)
        x_train, y_train = x_windows[: split.n_train], y_windows[: split.n_train]
        x_eval, y_eval = x_windows[split.n_train :], y_windows[split.n_train :]

    logger.info(
        f"Prepared dataset: x_train {x_train.shape}, y_train {y_train.shape}, x_eval {x_eval.shape}, y_eval {y_eval.shape}"
    )
    return PreparedDataset(
        x_train=x_train,
        y_train=y_train,
        x_eval=x_eval,
        y_eval=y_eval,
        schema=schema,
        encoding=encoding,
        scaler_state=scaler_state,
        split=split,
        split_config=split_config,
        records=records,
    )


# 生の CSV テキストからデータセットを準備する関数
def prepare_dataset(
    text: str,
    schema_config: SchemaConfig | None = None,
    split_config: SplitConfig | None = None,
) -> PreparedDataset:
    table = parse_csv(text)
    schema, records = filter_records(table, schema_config or SchemaConfig())
    return prepare_records(schema, records, split_config or SplitConfig())
