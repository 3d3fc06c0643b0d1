# アーティファクト（成果物）の保存パスを管理するミドルウェアモジュール
from pathlib import Path


# アーティファクトのパス管理クラス
# ジョブタイプとバージョン（タイムスタンプ）から保存ディレクトリを決め、存在しなければ作成する
class Artifact:
    def __init__(self, version: str, job_type: str, root_dir: Path | str = "./artifact") -> None:
        # キープレフィックス（例: "train/mlp_attrition/20240101120000"）
        self.key_prefix = f"{job_type}/{version}"
        self.dir_path = Path(root_dir) / self.key_prefix
        self.dir_path.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"Artifact(dir_path={str(self.dir_path)!r})"

    # アーティファクトディレクトリ内の指定ファイル名の完全パスを返すメソッド
    def file_path(self, file_name: str) -> Path:
        return self.dir_path / file_name
