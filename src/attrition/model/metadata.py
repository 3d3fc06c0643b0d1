# 訓練実行のメタデータを収集・保存するモジュール
# 同じ分割・同じ特徴量で再実行できるよう、モデル設定・データセットの概要・実行環境を1つの JSON にまとめる
import argparse
import json
import logging
import os
import platform
import subprocess
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime
from importlib import metadata
from pathlib import Path

import psutil

from .model_config import ModelConfig

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


# git コマンドを実行して標準出力を返す関数（git が無い・リポジトリ外の場合は None）
def _run_git(*args: str) -> str | None:
    try:
        result = subprocess.run(["git", *args], capture_output=True, text=True)
    except FileNotFoundError:
        logger.info("git command is not installed")
        return None
    return result.stdout.strip() or None


# 実行中のインタプリタとインストール済みパッケージの一覧
def python_environment() -> dict[str, str | dict[str, str]]:
    packages = {dist.metadata["Name"]: dist.version for dist in metadata.distributions() if dist.metadata["Name"]}
    return {
        "version": sys.version,
        "implementation": platform.python_implementation(),
        "executable": sys.executable,
        "packages": dict(sorted(packages.items())),
    }


# OS・CPU・メモリの情報
def machine_resources() -> dict[str, str | int | None]:
    memory = psutil.virtual_memory()
    return {
        "os": f"{platform.system()} {platform.release()}",
        "machine": platform.machine(),
        "cpu_count": os.cpu_count(),
        "memory_total": memory.total,
        "memory_available": memory.available,
    }


@dataclass
class MetaData:
    model_config: ModelConfig  # 使用したモデル設定（訓練パラメータ・分割方式・閾値）
    command_line_arguments: argparse.Namespace
    version: str  # タイムスタンプ文字列
    start_time: datetime
    end_time: datetime
    artifact_key_prefix: str
    feature_order: list[str] = field(default_factory=list)  # 特徴量ベクトルの各次元の名前
    dataset_summary: dict[str, int] = field(default_factory=dict)  # 行数・訓練/評価件数など

    @property
    def model_name(self) -> str:
        return self.model_config.name

    # 分割方式はリークの意味合いが異なるため、結果と一緒に必ず記録する
    def _model_config_dict(self) -> dict:
        model = self.model_config.model_class
        return {
            "model_class": type(model).__name__,
            "model_args": getattr(model, "args", {}),
            "training": self.model_config.training.to_dict(),
            "split": {key: str(value) for key, value in asdict(self.model_config.split).items()},
            "threshold": self.model_config.threshold,
        }

    def to_dict(self) -> dict:
        return {
            "model_name": self.model_name,
            "version": self.version,
            "model_config": self._model_config_dict(),
            "command_line_arguments": {key: str(value) for key, value in vars(self.command_line_arguments).items()},
            "start_time": self.start_time.strftime(TIME_FORMAT),
            "end_time": self.end_time.strftime(TIME_FORMAT),
            "elapsed_seconds": (self.end_time - self.start_time).total_seconds(),
            "artifact_key_prefix": self.artifact_key_prefix,
            "dataset": self.dataset_summary,
            "feature_order": self.feature_order,
            "git": {"commit": _run_git("rev-parse", "--short", "HEAD"), "branch": _run_git("branch", "--show-current")},
            "python": python_environment(),
            "resources": machine_resources(),
        }

    def save_as_json(self, output_path: Path) -> None:
        with open(output_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)
        logger.info(f"Saved metadata. {self.model_name=}, {self.version=}, {output_path=}")
