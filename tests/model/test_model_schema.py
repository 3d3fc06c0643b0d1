import pytest

from attrition.data_loader import parse_csv
from attrition.exceptions import SchemaError
from attrition.model import ColumnKind, Schema, SchemaConfig, filter_records, parse_numeric_or_default, resolve_schema


def test_resolve_schema_raises_when_label_missing():
    with pytest.raises(SchemaError):
        resolve_schema(["Age", "OverTime"], SchemaConfig())


def test_resolve_schema_keeps_header_order_for_categorical_columns():
    config = SchemaConfig(numeric_columns=("Age",), categorical_columns=("OverTime", "Gender", "JobRole"))

    schema = resolve_schema(["JobRole", "Age", "Attrition", "OverTime"], config)

    assert schema.categorical_columns == ("JobRole", "OverTime")
    assert schema.numeric_columns == ("Age",)
    assert schema.label_column == "Attrition"


def test_schema_rejects_label_as_feature():
    with pytest.raises(SchemaError):
        Schema(numeric_columns=("Attrition",), categorical_columns=(), label_column="Attrition")


def test_schema_column_kinds():
    schema = Schema(numeric_columns=("A",), categorical_columns=("B",), label_column="Attrition")

    assert schema.kind_of("A") == ColumnKind.NUMERIC
    assert schema.kind_of("B") == ColumnKind.CATEGORICAL
    assert schema.kind_of("Attrition") == ColumnKind.LABEL
    assert schema.kind_of("Unknown") is None
    assert schema.allowed_columns == frozenset({"A", "B", "Attrition"})


def test_filter_records_drops_columns_outside_schema(attrition_csv, small_schema_config):
    schema, records = filter_records(parse_csv(attrition_csv), small_schema_config)

    assert len(records) == 40
    assert "Notes" not in records[0]
    assert set(records[0]) == {
        "Age",
        "MonthlyIncome",
        "EmployeeNumber",
        "YearsAtCompany",
        "OverTime",
        "JobRole",
        "Department",
        "Attrition",
    }
    assert schema.categorical_columns == ("OverTime", "JobRole", "Department")


def test_filter_records_keeps_numeric_columns_missing_from_header():
    config = SchemaConfig(numeric_columns=("A", "Missing"), categorical_columns=("B",))

    schema, records = filter_records(parse_csv("A,B,Attrition\n1,x,Yes\n"), config)

    assert schema.numeric_columns == ("A", "Missing")
    assert "Missing" not in records[0]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.5", 1.5),
        (" 3 ", 3.0),
        ("-2", -2.0),
        ("1e3", 1000.0),
        ("", 0.0),
        (None, 0.0),
        ("abc", 0.0),
        ("inf", 0.0),
        ("nan", 0.0),
        ("1_000", 0.0),
    ],
)
def test_parse_numeric_or_default(raw, expected):
    assert parse_numeric_or_default(raw) == expected


def test_parse_numeric_or_default_custom_default():
    assert parse_numeric_or_default("n/a", default=-1.0) == -1.0


@pytest.mark.parametrize(
    "label_column",
    ["OverTime", "Age"],
    ids=["categorical-allow-list", "numeric-allow-list"],
)
def test_resolve_schema_drops_label_from_features(label_column):
    schema = resolve_schema(["Age", "OverTime", "JobRole"], SchemaConfig(label_column=label_column))

    assert label_column not in schema.numeric_columns
    assert label_column not in schema.categorical_columns
    assert schema.label_column == label_column
