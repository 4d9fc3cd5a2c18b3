import pytest

from identity_matcher.errors import InvalidWeights
from identity_matcher.matching.scoring import DEFAULT_WEIGHTS, normalize_weights, weighted_score
from identity_matcher.models import Axis


def test_default_weights_sum_to_one():
    assert sum(DEFAULT_WEIGHTS.values()) == pytest.approx(1.0)
    assert normalize_weights(None) == DEFAULT_WEIGHTS


def test_reference_scenario_score():
    similarities = {
        Axis.PSYCHOLOGICAL: 0.9,
        Axis.VALUES: 0.6,
        Axis.INTERESTS: 0.3,
        Axis.BEHAVIORAL: 0.1,
    }
    assert weighted_score(similarities, DEFAULT_WEIGHTS) == pytest.approx(0.625, abs=1e-9)


def test_custom_weights_are_renormalized():
    weights = normalize_weights({"psychological": 2, "values": 2, "interests": 4, "behavioral": 0})
    assert weights == {
        Axis.PSYCHOLOGICAL: 0.25,
        Axis.VALUES: 0.25,
        Axis.INTERESTS: 0.5,
        Axis.BEHAVIORAL: 0.0,
    }


def test_weights_accept_axis_keys():
    weights = normalize_weights({axis: 1.0 for axis in Axis})
    assert all(value == pytest.approx(0.25) for value in weights.values())


@pytest.mark.parametrize(
    "weights",
    [
        {"psychological": 0.5, "values": 0.5, "interests": 0.0},
        {"psychological": 0.5, "values": 0.5, "interests": 0.0, "behavioral": -0.1},
        {"psychological": 0.5, "values": 0.5, "interests": 0.0, "behavioral": 0.0, "humor": 0.1},
        {"psychological": 0, "values": 0, "interests": 0, "behavioral": 0},
        {"psychological": "0.5", "values": 0.5, "interests": 0.0, "behavioral": 0.0},
        {"psychological": float("nan"), "values": 0.5, "interests": 0.0, "behavioral": 0.0},
        {"psychological": True, "values": 0.5, "interests": 0.0, "behavioral": 0.0},
    ],
)
def test_invalid_weights_are_rejected(weights):
    with pytest.raises(InvalidWeights):
        normalize_weights(weights)

