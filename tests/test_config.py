"""Tests for configuration system."""

import pytest
from topicgraph.config import TopicGraphConfig, EngagementWeights


def test_default_config():
    """Test default configuration."""
    config = TopicGraphConfig.default()
    config.validate()

    assert config.engagement.like_weight == 150
    assert config.engagement.comment_weight == 500
    assert config.engagement.include_duration is True
    assert config.engagement.include_likes_comments is True
    assert config.aggregation.regularization_weight == 10
    assert config.aggregation.minimum_sample_size == 1
    assert config.aggregation.max_nodes == 10
    assert config.aggregation.sample_size_ceiling == 100
    assert config.canonical_order == "discovery"


def test_category_threshold_is_half_not_eighty_percent():
    """The threshold in use is 0.5 even though older notes say 80%."""
    config = TopicGraphConfig.default()
    assert config.categories.threshold == 0.5
    assert config.categories.threshold != 0.8


def test_connection_cap_is_fifty_not_five():
    """The per-topic connection cap is 50 even though older notes say top 5."""
    config = TopicGraphConfig.default()
    assert config.connections.max_connections == 50


def test_from_params():
    """Test building config from graph endpoint parameters."""
    config = TopicGraphConfig.from_params(
        regularization_weight=5,
        minimum_sample_size=3,
        max_nodes=25,
        category_threshold=0.7,
    )
    config.validate()

    assert config.aggregation.regularization_weight == 5
    assert config.aggregation.minimum_sample_size == 3
    assert config.aggregation.max_nodes == 25
    assert config.categories.threshold == 0.7


def test_invalid_weights():
    """Test validation catches negative engagement weights."""
    with pytest.raises(ValueError):
        EngagementWeights(like_weight=-1).validate()


@pytest.mark.parametrize("mutate", [
    lambda c: setattr(c.aggregation, "max_nodes", 0),
    lambda c: setattr(c.aggregation, "regularization_weight", -1),
    lambda c: setattr(c.connections, "max_connections", 0),
    lambda c: setattr(c.categories, "threshold", 1.5),
    lambda c: setattr(c, "canonical_order", "random"),
])
def test_invalid_config(mutate):
    """Test validation catches out-of-range parameters."""
    config = TopicGraphConfig.default()
    mutate(config)
    with pytest.raises(ValueError):
        config.validate()


def test_config_to_dict():
    """Test config serializes for run metadata."""
    data = TopicGraphConfig.default().to_dict()
    assert data["categories"]["threshold"] == 0.5
    assert data["aggregation"]["max_nodes"] == 10
