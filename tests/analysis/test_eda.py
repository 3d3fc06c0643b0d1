import json
import math

import pytest

from attrition.analysis import category_rates, class_balance, run_eda, top_correlations
from attrition.data_loader import parse_csv
from attrition.model import SchemaConfig, filter_records


@pytest.fixture
def loaded(attrition_csv, small_schema_config):
    return filter_records(parse_csv(attrition_csv), small_schema_config)


def test_class_balance(loaded):
    schema, records = loaded

    balance = class_balance(records, schema)

    assert balance.positive == 13
    assert balance.negative == 27
    assert balance.rate == pytest.approx(13 / 40)


def test_top_correlations_sorted_by_magnitude(loaded):
    schema, records = loaded

    correlations = top_correlations(records, schema, top_k=3)

    assert len(correlations) == 3
    magnitudes = [abs(value) for _, value in correlations]
    assert magnitudes == sorted(magnitudes, reverse=True)
    assert all(name in schema.numeric_columns for name, _ in correlations)


def test_top_correlations_constant_column_is_zero():
    table = parse_csv("A,K,B,Attrition\n1,5,x,Yes\n2,5,y,No\n4,5,x,Yes\n")
    schema, records = filter_records(table, SchemaConfig(numeric_columns=("A", "K"), categorical_columns=("B",)))

    correlations = dict(top_correlations(records, schema))

    assert correlations["A"] > 0
    assert correlations["K"] == 0.0
    assert not math.isnan(correlations["K"])


def test_category_rates(loaded):
    schema, records = loaded

    rates = category_rates(records, schema, columns=("OverTime", "Notes"))

    # スキーマに含まれない列は集計しない
    assert list(rates) == ["OverTime"]
    over_time = rates["OverTime"]
    assert [rate.value for rate in over_time] == ["Yes", "No"]
    assert over_time[0].rate == pytest.approx(8 / 14)
    assert over_time[0].total == 14
    assert over_time[1].rate == pytest.approx(5 / 26)
    assert over_time[1].total == 26


def test_run_eda_report_is_json_serializable(loaded):
    schema, records = loaded

    report = run_eda(records, schema, top_k=2)

    payload = json.loads(json.dumps(report.to_dict()))
    assert payload["balance"]["positive"] == 13
    assert len(payload["top_correlations"]) == 2
    assert set(payload["category_rates"]) == {"OverTime", "JobRole"}
