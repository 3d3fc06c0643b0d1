# 区切り文字付きテキストをレコード列に変換するパーサーモジュール
# 引用符やエスケープには対応せず、ヘッダーと列数が一致しない行は黙って読み飛ばす
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, TypeAlias

from attrition.exceptions import FormatError

logger = logging.getLogger(__name__)

# 1レコード分の「カラム名 -> 生の文字列値」の読み取り専用マッピング
Record: TypeAlias = Mapping[str, str]

# \r\n と \r を \n に正規化するための正規表現
_LINE_BREAK_RE = re.compile(r"\r\n?")


# パース結果（ヘッダーとレコード列）を保持するデータクラス
@dataclass(frozen=True)
class ParsedTable:
    header: tuple[str, ...]  # トリム済みのヘッダー（列の並び順を保持する）
    records: tuple[Record, ...]  # 列数がヘッダーと一致した行のみ
    dropped_lines: int = 0  # 列数不一致で読み飛ばした行数

    def __len__(self) -> int:
        return len(self.records)


# テキスト全体をヘッダーとレコード列に変換する関数
# 空行を除いた行が2行未満（ヘッダーのみ、または空）の場合は FormatError を送出する
def parse_csv(text: str, delimiter: str = ",") -> ParsedTable:
    lines = [line for line in _LINE_BREAK_RE.sub("\n", text).split("\n") if line.strip()]
    if len(lines) < 2:
        raise FormatError(f"CSV has no data. {len(lines)=}")

    header = tuple(field.strip() for field in lines[0].split(delimiter))
    records: list[Record] = []
    dropped_lines = 0
    for line in lines[1:]:
        fields = line.split(delimiter)
        # 列数がヘッダーと一致しない行はエラーにせず除外する
        if len(fields) != len(header):
            dropped_lines += 1
            continue
        records.append(MappingProxyType({name: value.strip() for name, value in zip(header, fields)}))

    logger.info(f"Parsed csv text. {len(header)=}, {len(records)=}, {dropped_lines=}")
    return ParsedTable(header=header, records=tuple(records), dropped_lines=dropped_lines)


# ローカルファイルからテキストを読み込む関数（パイプラインで唯一の I/O 境界）
def load_csv_text(file_path: Path | str, encoding: str = "utf-8") -> str:
    file_path = Path(file_path)
    logger.info(f"Load csv text from {file_path}")
    # BOM 付き UTF-8 でもヘッダー先頭の列名が崩れないように utf-8-sig で読む
    if encoding == "utf-8":
        encoding = "utf-8-sig"
    return file_path.read_text(encoding=encoding)
