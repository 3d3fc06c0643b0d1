# カテゴリ列のエンコーディング（カテゴリ値 -> インデックス）を学習するモジュール
# 全レコードから観測値を集めて辞書順に並べ、one-hot ブロックの位置を決める
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from attrition.data_loader import Record

from .schema import Schema, get_categorical_value

logger = logging.getLogger(__name__)

# one-hot 特徴量名の区切り文字（"<列名>__<カテゴリ値>"）
FEATURE_NAME_SEPARATOR = "__"


# 単一カテゴリ列のエンコーディング
# index は観測されたカテゴリ値（欠損は空文字）を辞書順に並べた 0..k-1 の連番
@dataclass(frozen=True)
class CategoryEncoding:
    column: str
    categories: tuple[str, ...]  # インデックス順のカテゴリ値
    index: Mapping[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "index", MappingProxyType({value: i for i, value in enumerate(self.categories)}))

    @property
    def size(self) -> int:
        return len(self.categories)

    # カテゴリ値のインデックスを返す（学習時に見ていない値は None）
    def lookup(self, value: str) -> int | None:
        return self.index.get(value)

    @property
    def feature_names(self) -> list[str]:
        return [f"{self.column}{FEATURE_NAME_SEPARATOR}{value}" for value in self.categories]


# データセット1回の読み込みにつき一度だけ学習されるエンコーディング一式
# feature_order は特徴量ベクトルの各次元の名前で、外部に報告する契約の一部になる
@dataclass(frozen=True)
class FittedEncoding:
    schema: Schema
    encodings: tuple[CategoryEncoding, ...]  # スキーマのカテゴリ列順

    def __getitem__(self, column: str) -> CategoryEncoding:
        for encoding in self.encodings:
            if encoding.column == column:
                return encoding
        raise KeyError(column)

    def __contains__(self, column: object) -> bool:
        return any(encoding.column == column for encoding in self.encodings)

    @property
    def feature_order(self) -> list[str]:
        order = list(self.schema.numeric_columns)
        for encoding in self.encodings:
            order.extend(encoding.feature_names)
        return order

    @property
    def dimension(self) -> int:
        return len(self.schema.numeric_columns) + sum(encoding.size for encoding in self.encodings)


# 1つのカテゴリ列について観測値を辞書順に並べてエンコーディングを作る関数
def fit_category_encoding(records: Iterable[Record], column: str) -> CategoryEncoding:
    distinct = {get_categorical_value(record, column) for record in records}
    return CategoryEncoding(column=column, categories=tuple(sorted(distinct)))


# スキーマの全カテゴリ列についてエンコーディングを学習する関数
# 再学習は常に現在のレコード全体から作り直し、以前の状態とマージはしない
def fit_category_encodings(records: Iterable[Record], schema: Schema) -> FittedEncoding:
    records = list(records)
    encodings = tuple(fit_category_encoding(records, column) for column in schema.categorical_columns)
    fitted = FittedEncoding(schema=schema, encodings=encodings)
    logger.info(f"Fitted category encodings. {[(e.column, e.size) for e in encodings]}, {fitted.dimension=}")
    return fitted
