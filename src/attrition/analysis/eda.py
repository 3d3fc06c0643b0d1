# 読み込んだレコードに対する探索的データ分析（EDA）を行うモジュール
# クラスバランス・数値列とラベルの相関・カテゴリ値ごとの離職率を pandas で集計する
import logging
from dataclasses import asdict, dataclass, field
from typing import Iterable, Sequence

import pandas as pd

from attrition.data_loader import Record
from attrition.model.preprocess import encode_label
from attrition.model.schema import Schema, get_categorical_value, get_label_value, parse_numeric_or_default

logger = logging.getLogger(__name__)

# 離職率を集計する既定のカテゴリ列
DEFAULT_RATE_COLUMNS = ("OverTime", "JobRole")


# 正例・負例の件数と正例率
@dataclass(frozen=True)
class ClassBalance:
    positive: int
    negative: int
    rate: float


# カテゴリ値ごとの離職率
@dataclass(frozen=True)
class CategoryRate:
    value: str
    rate: float
    total: int


# EDA の結果一式
@dataclass(frozen=True)
class EdaReport:
    balance: ClassBalance
    top_correlations: list[tuple[str, float]] = field(default_factory=list)
    category_rates: dict[str, list[CategoryRate]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def _labels(records: Sequence[Record], schema: Schema) -> pd.Series:
    return pd.Series([encode_label(get_label_value(record, schema)) for record in records], dtype="int64")


# 正例（離職）と負例の件数を数える関数
def class_balance(records: Sequence[Record], schema: Schema) -> ClassBalance:
    labels = _labels(records, schema)
    positive = int(labels.sum())
    negative = len(labels) - positive
    return ClassBalance(positive=positive, negative=negative, rate=positive / max(1, len(labels)))


# 各数値列とラベルのピアソン相関を計算し、絶対値の大きい順に top_k 件返す関数
# 欠損・不正値は 0 で補完し、分散が 0 の列は相関 0 とする
def top_correlations(records: Sequence[Record], schema: Schema, top_k: int = 8) -> list[tuple[str, float]]:
    df = pd.DataFrame(
        {
            name: [parse_numeric_or_default(record.get(name)) for record in records]
            for name in schema.numeric_columns
        },
        dtype="float64",
    )
    labels = _labels(records, schema).astype("float64")
    correlations = df.corrwith(labels).fillna(0.0)
    ranked = correlations.reindex(correlations.abs().sort_values(ascending=False, kind="stable").index)
    return [(str(name), float(value)) for name, value in ranked.head(top_k).items()]


# カテゴリ値ごとの離職率を計算する関数（離職率の降順）
# スキーマに含まれない列は読み飛ばす
def category_rates(
    records: Sequence[Record],
    schema: Schema,
    columns: Iterable[str] = DEFAULT_RATE_COLUMNS,
) -> dict[str, list[CategoryRate]]:
    labels = _labels(records, schema)
    rates: dict[str, list[CategoryRate]] = {}
    for column in columns:
        if column not in schema.categorical_columns:
            continue
        df = pd.DataFrame({"value": [get_categorical_value(record, column) for record in records], "label": labels})
        grouped = df.groupby("value", sort=True)["label"].agg(["sum", "count"]).reset_index()
        grouped["rate"] = grouped["sum"] / grouped["count"].clip(lower=1)
        grouped = grouped.sort_values("rate", ascending=False, kind="stable")
        rates[column] = [
            CategoryRate(value=str(row["value"]), rate=float(row["rate"]), total=int(row["count"]))
            for _, row in grouped.iterrows()
        ]
    return rates


# EDA 一式を実行してレポートを返す関数
def run_eda(
    records: Sequence[Record],
    schema: Schema,
    top_k: int = 8,
    rate_columns: Iterable[str] = DEFAULT_RATE_COLUMNS,
) -> EdaReport:
    report = EdaReport(
        balance=class_balance(records, schema),
        top_correlations=top_correlations(records, schema, top_k=top_k),
        category_rates=category_rates(records, schema, rate_columns),
    )
    logger.info(f"Finished EDA. {report.balance=}, {report.top_correlations[:3]=}")
    return report
