import argparse
import json
from datetime import datetime

from attrition.model import MetaData, get_model_config


def test_save_as_json(tmp_path):
    meta_data = MetaData(
        model_config=get_model_config("mlp_attrition_window"),
        command_line_arguments=argparse.Namespace(csv_path="data.csv", epochs=None),
        version="20240101120000",
        start_time=datetime(2024, 1, 1, 12, 0, 0),
        end_time=datetime(2024, 1, 1, 12, 0, 30),
        artifact_key_prefix="train/mlp_attrition_window/20240101120000",
        feature_order=["Age", "OverTime__No", "OverTime__Yes"],
        dataset_summary={"n_records": 40, "dropped_lines": 1},
    )
    output_path = tmp_path / "metadata.json"

    meta_data.save_as_json(output_path)

    saved = json.loads(output_path.read_text())
    assert saved["model_name"] == "mlp_attrition_window"
    assert saved["model_config"]["model_class"] == "MLPClassifierModel"
    assert saved["model_config"]["split"]["mode"] == "chronological"
    assert saved["model_config"]["split"]["seq_len"] == "4"
    assert saved["elapsed_seconds"] == 30.0
    assert saved["dataset"] == {"n_records": 40, "dropped_lines": 1}
    assert saved["command_line_arguments"]["epochs"] == "None"
    assert saved["resources"]["memory_total"] > 0
