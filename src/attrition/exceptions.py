# パイプラインの構造的な異常を表す例外クラスの定義
# いずれも実行中のパイプラインにとって致命的で、内部でのリトライは行わない
# 行単位のデータ品質の問題（列数不一致の行・欠損値・未知カテゴリ）は例外にせず許容する


# パイプライン例外の基底クラス
class PipelineError(Exception):
    pass


# 入力テキストが空、またはヘッダーとデータ行がそろっていない場合の例外
class FormatError(PipelineError, ValueError):
    pass


# 必須のラベル列が存在しない、またはスキーマ定義が矛盾している場合の例外
class SchemaError(PipelineError, ValueError):
    pass


# 分割やウィンドウの設定が空のパーティションや不正な形状を生む場合の例外
class ConfigError(PipelineError, ValueError):
    pass


# 必要な fit の前に操作が呼ばれた場合の例外（例: fit 前の標準化、エンコード前の組み立て）
class StateError(PipelineError, RuntimeError):
    pass
