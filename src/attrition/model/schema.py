# 特徴量スキーマ（数値列・カテゴリ列・ラベル列）の定義とスキーマフィルタを提供するモジュール
# ヘッダーとの照合は読み込み時に一度だけ行い、以降の処理はこのスキーマの列順に従う
import logging
import math
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Iterable

from attrition.const import CATEGORICAL_COLUMNS, LABEL_COLUMN, NUMERIC_COLUMNS
from attrition.data_loader import ParsedTable, Record
from attrition.exceptions import SchemaError

logger = logging.getLogger(__name__)


# カラムの種類
class ColumnKind(StrEnum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    LABEL = "label"


# 単一カラムのスキーマ情報を保持するデータクラス
@dataclass(frozen=True)
class ColumnSchema:
    name: str  # カラム名（CSV ヘッダーの列名に一致する）
    kind: ColumnKind  # 数値・カテゴリ・ラベルのいずれか


# 読み込み前に指定する列の許可リスト
# 数値列は固定で、カテゴリ列はヘッダーとの積集合で実際に使う列が決まる
@dataclass(frozen=True)
class SchemaConfig:
    numeric_columns: tuple[str, ...] = NUMERIC_COLUMNS
    categorical_columns: tuple[str, ...] = CATEGORICAL_COLUMNS
    label_column: str = LABEL_COLUMN


# ヘッダーと照合済みのスキーマ
# 数値列・カテゴリ列・ラベル列は互いに素で、ラベル列はちょうど1つ
@dataclass(frozen=True)
class Schema:
    numeric_columns: tuple[str, ...]
    categorical_columns: tuple[str, ...]
    label_column: str
    columns: tuple[ColumnSchema, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        features = self.numeric_columns + self.categorical_columns
        if self.label_column in features:
            raise SchemaError(f"Label column must not be a feature: {self.label_column}")
        if len(set(features)) != len(features):
            raise SchemaError(f"Duplicated feature columns: {features}")
        columns = (
            [ColumnSchema(name, ColumnKind.NUMERIC) for name in self.numeric_columns]
            + [ColumnSchema(name, ColumnKind.CATEGORICAL) for name in self.categorical_columns]
            + [ColumnSchema(self.label_column, ColumnKind.LABEL)]
        )
        object.__setattr__(self, "columns", tuple(columns))

    # 残すカラム名の集合（数値列 ∪ カテゴリ列 ∪ {ラベル列}）
    @property
    def allowed_columns(self) -> frozenset[str]:
        return frozenset(column.name for column in self.columns)

    # 指定したカラムの種類を返す（スキーマ外の列は None）
    def kind_of(self, name: str) -> ColumnKind | None:
        for column in self.columns:
            if column.name == name:
                return column.kind
        return None


# 数値列の生の値を取り出す（列が存在しない場合は None）
def get_numeric_value(record: Record, name: str) -> str | None:
    return record.get(name)


# カテゴリ列の生の値を取り出す（欠損は空文字として扱う）
def get_categorical_value(record: Record, name: str) -> str:
    return record.get(name) or ""


# ラベル列の生の値を取り出す（欠損は空文字として扱う）
def get_label_value(record: Record, schema: Schema) -> str:
    return record.get(schema.label_column) or ""


# ヘッダーと許可リストからスキーマを確定させる関数
# ラベル列がヘッダーにない場合は SchemaError を送出する
# ラベル列に指定された列は許可リストに含まれていても特徴量から外す
def resolve_schema(header: Iterable[str], config: SchemaConfig) -> Schema:
    header = list(header)
    if config.label_column not in header:
        raise SchemaError(f"Missing required column: {config.label_column}")

    known_categorical = set(config.categorical_columns)
    # カテゴリ列はヘッダーの並び順を保ったまま許可リストとの積集合をとる
    categorical_columns = tuple(name for name in header if name in known_categorical and name != config.label_column)
    # 数値列はヘッダーに存在しなくてもスキーマに残し、組み立て時に既定値で補完する
    return Schema(
        numeric_columns=tuple(name for name in config.numeric_columns if name != config.label_column),
        categorical_columns=categorical_columns,
        label_column=config.label_column,
    )


# パース結果をスキーマで絞り込む関数
# 許可された列以外のキーを落とした新しいレコード列を返す
def filter_records(table: ParsedTable, config: SchemaConfig) -> tuple[Schema, tuple[Record, ...]]:
    schema = resolve_schema(table.header, config)
    allowed = schema.allowed_columns
    kept_columns = [name for name in table.header if name in allowed]
    records = tuple(MappingProxyType({name: record[name] for name in kept_columns}) for record in table.records)

    missing_numeric = [name for name in schema.numeric_columns if name not in table.header]
    logger.info(
        f"Loaded {len(records)} rows "
        f"({len(schema.categorical_columns)} categorical, {len(schema.numeric_columns)} numeric). {missing_numeric=}"
    )
    return schema, records


# 数値列の欠損・不正値の扱いを一箇所にまとめた関数
# 欠損・数値として解釈できない値・非有限値（inf, nan）はすべて default（既定 0.0）に置き換える
# float() が受け付ける桁区切りの "_"（"1_000" など）も不正値として扱う
def parse_numeric_or_default(raw: str | None, default: float = 0.0) -> float:
    if raw is None:
        return default
    text = raw.strip()
    if not text or "_" in text:
        return default
    try:
        value = float(text)
    except ValueError:
        return default
    return value if math.isfinite(value) else default
