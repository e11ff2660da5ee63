import numpy as np
import pytest

from imagediff.services.channel_aggregator_service import ChannelAggregatorService


def planes(*values, shape=(10, 12)):
    return [np.full(shape, v, np.float32) for v in values]


@pytest.fixture
def aggregator():
    return ChannelAggregatorService()


def test_combined_is_product_not_average(aggregator):
    scores = aggregator.aggregate(planes(0.5, 0.8, 1.0))
    assert scores.red == 0.5
    assert scores.green == pytest.approx(0.8)
    assert scores.blue == 1.0
    assert scores.combined == pytest.approx(0.4)
    assert scores.combined == scores.red * scores.green * scores.blue


def test_all_ones(aggregator):
    assert aggregator.aggregate(planes(1, 1, 1)).combined == 1.0


def test_one_dead_channel_collapses_combined(aggregator):
    scores = aggregator.aggregate(planes(1, 1, 0))
    assert scores.combined == 0.0


def test_mean_is_unweighted(aggregator):
    m = np.zeros((2, 2), np.float32)
    m[0, 0] = 1.0
    assert aggregator.mean_score(m) == 0.25


def test_requires_three_maps(aggregator):
    with pytest.raises(ValueError):
        aggregator.aggregate(planes(1, 1))
