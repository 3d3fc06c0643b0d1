# 訓練・評価データへの分割を行うモジュール
# 固定シードの決定論的シャッフルによる分割と、時系列順に並べた上での位置による分割の2方式を提供する
# 2方式はリーク・汎化の意味合いが異なるため、1回の実行ではどちらか一方を明示的に選ぶ
import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator, Sequence

import numpy as np
import numpy.typing as npt

from attrition.const import (
    DEFAULT_ORDER_COLUMN,
    DEFAULT_SEED,
    DEFAULT_TEST_FRACTION,
    DEFAULT_TIE_BREAK_COLUMN,
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    MAX_SEQUENCE_LENGTH,
    MAX_TEST_FRACTION,
    MIN_TEST_FRACTION,
)
from attrition.data_loader import Record
from attrition.exceptions import ConfigError

from .schema import parse_numeric_or_default

logger = logging.getLogger(__name__)


# 分割方式
class SplitMode(StrEnum):
    SHUFFLE = "shuffle"  # 固定シードで並べ替えてから分割する
    CHRONOLOGICAL = "chronological"  # 並び順キーでソートし、古い側を訓練・新しい側を評価にする


# 分割の設定
# seq_len と並び順キーは時系列モードでのみ使う
@dataclass(frozen=True)
class SplitConfig:
    mode: SplitMode = SplitMode.SHUFFLE
    test_fraction: float = DEFAULT_TEST_FRACTION  # 評価データの割合（[0.05, 0.9] に丸める）
    seed: int = DEFAULT_SEED  # シャッフルモードの LCG シード
    seq_len: int = 1  # 時系列モードのウィンドウ長
    order_column: str = DEFAULT_ORDER_COLUMN  # 時系列モードの並び順キー（昇順）
    tie_break_column: str | None = DEFAULT_TIE_BREAK_COLUMN  # 並び順キーが同じ場合の副キー

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "mode", SplitMode(self.mode))
        except ValueError as e:
            raise ConfigError(f"Invalid split mode: {self.mode}") from e
        if not 1 <= self.seq_len <= MAX_SEQUENCE_LENGTH:
            raise ConfigError(f"Sequence length must be in [1, {MAX_SEQUENCE_LENGTH}]. {self.seq_len=}")
        if self.mode == SplitMode.SHUFFLE and self.seq_len != 1:
            raise ConfigError(f"Sliding windows are only supported in chronological mode. {self.seq_len=}")


# 分割結果のインデックス集合（互いに素で、合わせると全体を覆う）
@dataclass(frozen=True)
class SplitIndices:
    train: tuple[int, ...]
    eval: tuple[int, ...]

    @property
    def n_train(self) -> int:
        return len(self.train)

    @property
    def n_eval(self) -> int:
        return len(self.eval)


# 線形合同法（LCG）による [0, 1) の疑似乱数列を生成するジェネレータ
def lcg_uniform(seed: int = DEFAULT_SEED) -> Iterator[float]:
    state = seed % LCG_MODULUS
    while True:
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        yield state / LCG_MODULUS


# 0..n-1 のインデックスを Fisher-Yates で並べ替えた順列を返す関数
# 外部の乱数源は使わないため、同じ n と seed なら常に同じ順列になる
def permutation(n: int, seed: int = DEFAULT_SEED) -> list[int]:
    indices = list(range(n))
    rand = lcg_uniform(seed)
    for i in range(n - 1, 0, -1):
        j = math.floor(next(rand) * (i + 1))
        indices[i], indices[j] = indices[j], indices[i]
    return indices


# 評価データの件数を返す関数
# test_fraction は [0.05, 0.9] に丸め、評価データは最低1件にする
def eval_size(n: int, test_fraction: float) -> int:
    fraction = min(max(test_fraction, MIN_TEST_FRACTION), MAX_TEST_FRACTION)
    return max(1, math.floor(n * fraction))


def _check_size(n: int) -> None:
    if n < 2:
        raise ConfigError(f"At least 2 examples are required to split into train and eval. {n=}")


# 決定論的シャッフルで分割する関数
# 並べ替えた順列の先頭 n_train 件を訓練、残りを評価にする
def split_shuffled(n: int, test_fraction: float, seed: int = DEFAULT_SEED) -> SplitIndices:
    _check_size(n)
    n_eval = eval_size(n, test_fraction)
    n_train = n - n_eval
    order = permutation(n, seed)
    split = SplitIndices(train=tuple(order[:n_train]), eval=tuple(order[n_train:]))
    logger.info(f"Split shuffled. {n=}, {seed=}, {split.n_train=}, {split.n_eval=}")
    return split


# 位置で分割する関数（時系列モード）
# 先頭の連続ブロックを訓練、末尾の連続ブロックを評価にする（シャッフルはしない）
def split_chronological(n: int, test_fraction: float) -> SplitIndices:
    _check_size(n)
    n_eval = eval_size(n, test_fraction)
    n_train = n - n_eval
    split = SplitIndices(train=tuple(range(n_train)), eval=tuple(range(n_train, n)))
    logger.info(f"Split chronological. {n=}, {split.n_train=}, {split.n_eval=}")
    return split


# レコードを並び順キーの昇順にソートしたインデックスを返す関数
# 同順位は副キーの昇順、それでも同じなら元の位置の順で決まる
def sort_chronologically(
    records: Sequence[Record],
    order_column: str,
    tie_break_column: str | None = None,
) -> list[int]:
    def sort_key(i: int) -> tuple[float, float, int]:
        record = records[i]
        primary = parse_numeric_or_default(record.get(order_column))
        secondary = parse_numeric_or_default(record.get(tie_break_column)) if tie_break_column else 0.0
        return primary, secondary, i

    return sorted(range(len(records)), key=sort_key)


# 長さ seq_len のスライディングウィンドウの範囲を返す関数
# ウィンドウ i は [i, i + seq_len) を覆い、ラベルは末尾要素のラベルを使う
def make_windows(n: int, seq_len: int) -> list[range]:
    if seq_len < 1:
        raise ConfigError(f"Sequence length must be >= 1. {seq_len=}")
    return [range(i, i + seq_len) for i in range(max(0, n - seq_len + 1))]


# 行列とラベルからウィンドウ化したテンソル [N, S, D] とラベル [N] を作る関数
def stack_windows(
    features: npt.NDArray[np.float64],
    labels: npt.NDArray[np.int64],
    seq_len: int,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int64]]:
    windows = make_windows(len(features), seq_len)
    if not windows:
        return (
            np.empty((0, seq_len, features.shape[1]), dtype=np.float64),
            np.empty((0,), dtype=np.int64),
        )
    x = np.stack([features[window.start : window.stop] for window in windows])
    y = np.asarray([labels[window.stop - 1] for window in windows], dtype=np.int64)
    return x, y
