from types import MappingProxyType

import numpy as np
import pytest

from attrition.data_loader import parse_csv
from attrition.exceptions import ConfigError, SchemaError, StateError
from attrition.model import (
    FittedEncoding,
    SplitConfig,
    SplitMode,
    assemble_record,
    assemble_records,
    decode_vector,
    encode_label,
    filter_records,
    fit_category_encodings,
    prepare_dataset,
)


@pytest.fixture
def tiny_encoding(tiny_csv, tiny_schema_config):
    schema, records = filter_records(parse_csv(tiny_csv), tiny_schema_config)
    return records, fit_category_encodings(records, schema)


def test_assemble_record_concrete_row(tiny_encoding):
    records, encoding = tiny_encoding

    vector, label = assemble_record(records[0], encoding)

    assert vector.tolist() == [1.0, 1.0, 0.0]
    assert label == 1


def test_assemble_record_unseen_category_gives_zero_block(tiny_encoding):
    _, encoding = tiny_encoding

    vector, label = assemble_record(MappingProxyType({"A": "7", "B": "unseen", "Attrition": "No"}), encoding)

    assert vector.tolist() == [7.0, 0.0, 0.0]
    assert label == 0


def test_assemble_record_missing_values_default(tiny_encoding):
    _, encoding = tiny_encoding

    vector, label = assemble_record(MappingProxyType({"A": "not-a-number"}), encoding)

    assert vector.tolist() == [0.0, 0.0, 0.0]
    assert label == 0


@pytest.mark.parametrize("raw, expected", [("Yes", 1), ("No", 0), ("yes", 0), ("", 0), (None, 0)])
def test_encode_label(raw, expected):
    assert encode_label(raw) == expected


def test_assemble_before_encoding_raises_state_error(tiny_encoding):
    records, encoding = tiny_encoding

    with pytest.raises(StateError):
        assemble_record(records[0], None)
    with pytest.raises(StateError):
        assemble_records(records, None)
    with pytest.raises(StateError):
        assemble_record(records[0], FittedEncoding(schema=encoding.schema, encodings=()))


def test_assemble_records_shapes(tiny_encoding):
    records, encoding = tiny_encoding

    features, labels = assemble_records(records, encoding)

    assert features.shape == (2, 3)
    assert labels.tolist() == [1, 0]


def test_decode_vector_round_trip(attrition_csv, small_schema_config):
    schema, records = filter_records(parse_csv(attrition_csv), small_schema_config)
    encoding = fit_category_encodings(records, schema)

    for record in records:
        vector, _ = assemble_record(record, encoding)
        decoded = decode_vector(vector, encoding)
        for name in schema.numeric_columns:
            assert decoded[name] == pytest.approx(float(record[name]))
        for name in schema.categorical_columns:
            assert decoded[name] == record[name]
            active = [
                feature
                for feature, value in zip(encoding.feature_order, vector)
                if feature.startswith(f"{name}__") and value == 1.0
            ]
            assert active == [f"{name}__{record[name]}"]


def test_prepare_dataset_shuffle_partitions(attrition_csv, small_schema_config):
    dataset = prepare_dataset(attrition_csv, small_schema_config, SplitConfig(test_fraction=0.25))

    assert dataset.split.n_train + dataset.split.n_eval == 40
    assert set(dataset.split.train).isdisjoint(dataset.split.eval)
    assert set(dataset.split.train) | set(dataset.split.eval) == set(range(40))
    assert dataset.x_train.shape == (30, len(dataset.feature_order))
    assert dataset.x_eval.shape == (10, len(dataset.feature_order))
    assert dataset.y_train.shape == (30,)
    assert dataset.input_shape == (1, len(dataset.feature_order))
    assert dataset.feature_order[:4] == ["Age", "MonthlyIncome", "EmployeeNumber", "YearsAtCompany"]


def test_prepare_dataset_scaler_fitted_on_train_only(attrition_csv, small_schema_config):
    dataset = prepare_dataset(attrition_csv, small_schema_config, SplitConfig(test_fraction=0.25))

    np.testing.assert_allclose(dataset.x_train.mean(axis=0), 0.0, atol=1e-9)
    std = dataset.x_train.std(axis=0)
    for d, fitted_std in enumerate(dataset.scaler_state.std):
        if fitted_std > 1e-3:
            assert std[d] == pytest.approx(1.0, abs=1e-9)
        else:
            np.testing.assert_allclose(dataset.x_train[:, d], 0.0, atol=1e-9)


def test_prepare_dataset_is_reproducible(attrition_csv, small_schema_config):
    first = prepare_dataset(attrition_csv, small_schema_config)
    second = prepare_dataset(attrition_csv, small_schema_config)

    assert first.feature_order == second.feature_order
    assert first.split == second.split
    np.testing.assert_array_equal(first.x_train, second.x_train)
    np.testing.assert_array_equal(first.x_eval, second.x_eval)


def test_prepare_dataset_chronological_windows(attrition_csv, small_schema_config):
    split_config = SplitConfig(mode=SplitMode.CHRONOLOGICAL, test_fraction=0.2, seq_len=3)

    dataset = prepare_dataset(attrition_csv, small_schema_config, split_config)

    n_windows = 40 - 3 + 1
    dimension = len(dataset.feature_order)
    assert dataset.split.n_train + dataset.split.n_eval == n_windows
    assert dataset.split.eval == tuple(range(dataset.split.n_train, n_windows))
    assert dataset.x_train.shape == (dataset.split.n_train, 3, dimension)
    assert dataset.x_eval.shape == (dataset.split.n_eval, 3, dimension)
    assert dataset.input_shape == (3, dimension)
    years = [float(record["YearsAtCompany"]) for record in dataset.records]
    assert years == sorted(years)


def test_prepare_dataset_chronological_rejects_non_numeric_order_column(attrition_csv, small_schema_config):
    split_config = SplitConfig(mode=SplitMode.CHRONOLOGICAL, order_column="JobRole")

    with pytest.raises(ConfigError):
        prepare_dataset(attrition_csv, small_schema_config, split_config)


def test_prepare_dataset_too_few_rows(tiny_schema_config):
    with pytest.raises(ConfigError):
        prepare_dataset("A,B,Attrition\n1,x,Yes\n", tiny_schema_config)


def test_prepare_dataset_too_few_windows(small_schema_config):
    text = "Age,YearsAtCompany,EmployeeNumber,Attrition\n30,1,1,Yes\n40,2,2,No\n50,3,3,No\n"
    split_config = SplitConfig(mode=SplitMode.CHRONOLOGICAL, seq_len=3)

    with pytest.raises(ConfigError):
        prepare_dataset(text, small_schema_config, split_config)


def test_prepare_dataset_missing_label_column(small_schema_config):
    with pytest.raises(SchemaError):
        prepare_dataset("Age,OverTime\n30,Yes\n40,No\n", small_schema_config)
