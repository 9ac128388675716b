from __future__ import annotations

import asyncio

import pytest

from fragrance_engine.profiles.models import PreferenceQuery
from fragrance_engine.recommendations.errors import ModelUnavailable
from fragrance_engine.recommendations.model_scorer import FEATURE_WIDTH, ModelScorer, encode_preferences


def test_feature_vector_layout():
    vector = encode_preferences(PreferenceQuery(season="Fall", occasion="special events", intensity=70))

    assert vector.shape == (1, FEATURE_WIDTH)
    assert vector.tolist() == [[70.0, 0, 0, 1, 0, 0, 0, 1]]


def test_unrecognized_values_encode_as_zeros():
    vector = encode_preferences(PreferenceQuery(season="monsoon", occasion="work"))
    assert vector.tolist() == [[50.0, 0, 0, 0, 0, 0, 0, 0]]


def test_load_missing_file_raises_model_unavailable(tmp_path):
    with pytest.raises(ModelUnavailable):
        ModelScorer.load(tmp_path / "nope.joblib")


def test_estimator_must_predict():
    with pytest.raises(ModelUnavailable):
        ModelScorer(object())


class _ConstantEstimator:
    def predict(self, features):
        return [[0.5]]


def test_feedback_keeps_only_most_recent_ratings():
    scorer = ModelScorer(_ConstantEstimator(), feedback_limit=2)

    async def rate_three():
        for item_id in (1, 2, 3):
            await scorer.learn("alice", item_id, 5)

    asyncio.run(rate_three())

    assert [entry["item_id"] for entry in scorer.feedback] == [2, 3]
