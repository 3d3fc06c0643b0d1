import numpy as np
import pytest

from attrition.exceptions import StateError
from attrition.model import LightGBMModel, TrainingConfig


@pytest.fixture
def separable_data():
    rng = np.random.default_rng(0)
    x = rng.normal(size=(200, 3))
    y = (x[:, 0] > 0).astype(np.int64)
    return x, y


def test_fit_records_history_per_round(separable_data):
    x, y = separable_data
    model = LightGBMModel(args=dict(num_leaves=7, min_data_in_leaf=5))

    history = model.fit(x, y, TrainingConfig(epochs=10, learning_rate=0.1))

    assert history.epochs == 10
    assert history.loss[-1] < history.loss[0]
    assert history.accuracy[-1] > 0.9


def test_predict_proba_and_save_load(separable_data, tmp_path):
    x, y = separable_data
    model = LightGBMModel(args=dict(min_data_in_leaf=5))
    model.fit(x, y, TrainingConfig(epochs=5, learning_rate=0.1))
    file_path = tmp_path / "model.txt"

    model.save(file_path)
    loaded = LightGBMModel.from_pretrained(str(file_path))

    y_prob = model.predict_proba(x)
    assert y_prob.shape == (200,)
    np.testing.assert_allclose(loaded.predict_proba(x), y_prob)


def test_predict_before_fit_raises_state_error(separable_data):
    x, _ = separable_data

    with pytest.raises(StateError):
        LightGBMModel().predict_proba(x)
