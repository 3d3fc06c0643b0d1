# ロギング設定を行うミドルウェアモジュール
# ルートロガーに標準出力と（任意で）アーティファクト内のログファイルを設定し、時刻は UTC で出力する
import logging
import time
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

# 冗長なログを出すサードパーティのロガー（WARNING 以上のみ出力する）
NOISY_LOGGERS = ("matplotlib", "PIL", "numexpr")


def _build_formatter() -> logging.Formatter:
    formatter = logging.Formatter(LOG_FORMAT)
    formatter.converter = time.gmtime
    return formatter


# ルートロガーのハンドラを差し替える関数
# 同じプロセスで複数回呼ばれても出力が重複しないよう、既存のハンドラは閉じてから外す
def set_logger_config(log_file_path: Path | None = None, level: int = logging.INFO) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file_path is not None:
        handlers.append(logging.FileHandler(log_file_path))

    formatter = _build_formatter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
