# 離職予測モデルの訓練パイプラインのエントリーポイント
# CSV を読み込んで特徴量を作り、モデルの訓練・評価を行って成果物をローカルのアーティファクトに保存する
import argparse
import json
import logging
from datetime import datetime

from attrition.analysis import run_eda
from attrition.data_loader import load_csv_text, parse_csv
from attrition.evaluation import (
    calculate_metrics,
    plot_histgram,
    plot_roc_auc_curve,
    plot_training_history,
)
from attrition.middleware import Artifact, set_logger_config
from attrition.model import (
    MetaData,
    SchemaConfig,
    SplitMode,
    filter_records,
    get_model_config,
    prepare_records,
)

logger = logging.getLogger(__name__)


# コマンドライン引数を解析して返す関数
# 訓練・分割パラメータは指定されたものだけモデル設定を上書きする
def load_options() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Attrition training pipeline arguments")
    # 入力 CSV のパス
    parser.add_argument("-c", "--csv_path", type=str, required=True)
    # 使用するモデル名
    parser.add_argument("-m", "--model_name", type=str, default="mlp_attrition")
    # ラベル列の名前
    parser.add_argument("--label_column", type=str, default=None)
    # 分割方式・評価データの割合・ウィンドウ長
    parser.add_argument("--split_mode", type=str, choices=[mode.value for mode in SplitMode], default=None)
    parser.add_argument("--test_fraction", type=float, default=None)
    parser.add_argument("--seq_len", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    # 訓練パラメータ
    parser.add_argument("--epochs", type=int, default=None)
    parser.add_argument("--batch_size", type=int, default=None)
    parser.add_argument("--learning_rate", type=float, default=None)
    parser.add_argument("--layer_width", type=int, default=None)
    parser.add_argument("--layer_count", type=int, default=None)
    # 予測確率を二値化する閾値
    parser.add_argument("--threshold", type=float, default=None)
    # アーティファクトの保存先ルートディレクトリ
    parser.add_argument("--artifact_dir", type=str, default="./artifact")

    return parser.parse_args()


def _pick(args: argparse.Namespace, names: list[str]) -> dict:
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


# 訓練パイプライン全体を実行するメイン関数
def main() -> None:
    args = load_options()

    # -----------------------------
    # Setup
    # -----------------------------
    current_time = datetime.now()
    # バージョン文字列はタイムスタンプから生成し、アーティファクトの識別子として使う
    version = current_time.strftime("%Y%m%d%H%M%S")
    artifact = Artifact(version=version, job_type=f"train/{args.model_name}", root_dir=args.artifact_dir)
    set_logger_config(log_file_path=artifact.file_path("log.txt"))

    split_override = _pick(args, ["test_fraction", "seq_len", "seed"])
    if args.split_mode is not None:
        split_override["mode"] = SplitMode(args.split_mode)
        # シャッフルモードではウィンドウを使わない
        if args.split_mode == SplitMode.SHUFFLE and args.seq_len is None:
            split_override["seq_len"] = 1
    model_config = get_model_config(model_name=args.model_name).override(
        training=_pick(args, ["epochs", "batch_size", "learning_rate", "layer_width", "layer_count"]),
        split=split_override,
        threshold=args.threshold,
    )
    schema_config = SchemaConfig() if args.label_column is None else SchemaConfig(label_column=args.label_column)
    logger.info(f"{artifact=}, {args=}, {model_config=}")

    # -----------------------------
    # Load Data
    # -----------------------------
    table = parse_csv(load_csv_text(args.csv_path))
    schema, records = filter_records(table, schema_config)

    # クラスバランス・相関・カテゴリ別離職率を集計する
    eda_report = run_eda(records, schema)

    # -----------------------------
    # Preprocess Data
    # -----------------------------
    # エンコード・組み立て・分割・標準化（統計量は訓練データのみで学習）を行う
    dataset = prepare_records(schema, records, model_config.split)
    logger.info(f"Dataset ready. {dataset.input_shape=}, {len(dataset.feature_order)=}")

    # -----------------------------
    # Train Model
    # -----------------------------
    model = model_config.model_class
    history = model.fit(dataset.x_train, dataset.y_train, model_config.training)

    # -----------------------------
    # Evaluate Model
    # -----------------------------
    # 訓練データでの評価（過学習チェック用）
    train_result = calculate_metrics(
        y_true=dataset.y_train,
        y_prob=model.predict_proba(dataset.x_train),
        threshold=model_config.threshold,
    )
    # 評価データでの評価（汎化性能の計測）
    y_prob = model.predict_proba(dataset.x_eval)
    eval_result = calculate_metrics(y_true=dataset.y_eval, y_prob=y_prob, threshold=model_config.threshold)
    metrics = dict(train=train_result.to_dict(), eval=eval_result.to_dict())

    fig_roc_auc_curve = plot_roc_auc_curve(y_true=dataset.y_eval, y_prob=y_prob)
    fig_histgram = plot_histgram(y_true=dataset.y_eval, y_prob=y_prob, threshold=model_config.threshold)
    fig_training_history = plot_training_history(history)

    # -----------------------------
    # Store Artifacts
    # -----------------------------
    # Save metadata
    meta_data = MetaData(
        model_config=model_config,
        command_line_arguments=args,
        version=version,
        start_time=current_time,
        end_time=datetime.now(),
        artifact_key_prefix=artifact.key_prefix,
        feature_order=dataset.feature_order,
        dataset_summary={
            "n_records": len(records),
            "dropped_lines": table.dropped_lines,
            "n_train": dataset.split.n_train,
            "n_eval": dataset.split.n_eval,
            "n_features": len(dataset.feature_order),
        },
    )
    meta_data.save_as_json(artifact.file_path("metadata.json"))

    # Save model
    model.save(artifact.file_path("model.bin"))

    # 特徴量の並び・標準化の統計量・評価指標・EDA・訓練履歴を JSON で保存する
    # Save preprocessing state and evaluation result
    outputs = {
        "feature_order.json": dataset.feature_order,
        "scaler_state.json": dataset.scaler_state.to_dict(),
        "metrics.json": metrics,
        "eda.json": eda_report.to_dict(),
        "history.json": history.to_dict(),
    }
    for file_name, payload in outputs.items():
        with open(artifact.file_path(file_name), "w") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

    fig_roc_auc_curve.savefig(artifact.file_path("roc_auc_curve.png"))
    fig_histgram.savefig(artifact.file_path("histgram.png"))
    fig_training_history.savefig(artifact.file_path("training_history.png"))

    logger.info(f"Finished training pipeline. {metrics['eval']=}, {artifact=}")


if __name__ == "__main__":
    main()
