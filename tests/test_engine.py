"""End-to-end tests for the topic graph engine."""

import json

import pytest

from topicgraph.config import TopicGraphConfig
from topicgraph.engine import TopicGraphEngine, compute_topic_graph, rank_topics
from topicgraph.models import TopicAssociation, TopicRecord
from topicgraph.providers import InMemoryCorpusProvider


def test_empty_corpus_returns_empty_graph():
    """No content or no topics is an empty graph, not an error."""
    graph = compute_topic_graph(InMemoryCorpusProvider())
    assert graph.topics == []
    assert graph.relationships == []

    only_topics = InMemoryCorpusProvider(topics=[TopicRecord(1, "cooking")])
    assert compute_topic_graph(only_topics).topics == []

    only_content = InMemoryCorpusProvider(content_items=[{"id": "a", "channel_id": "c"}])
    assert compute_topic_graph(only_content).topics == []


def test_multiplier_scenario_through_channel_normalization():
    """A's content averages 2.0 of its channel, B's 0.5 of its channel."""
    items = []
    # Channel x: A's five videos score 300, five untagged videos score 0 (mean 150)
    items += [{"id": f"a{i}", "channel_id": "x", "like_count": 2} for i in range(5)]
    items += [{"id": f"x{i}", "channel_id": "x"} for i in range(5)]
    # Channel y: B's five videos score 150, five untagged videos score 450 (mean 300)
    items += [{"id": f"b{i}", "channel_id": "y", "like_count": 1} for i in range(5)]
    items += [{"id": f"y{i}", "channel_id": "y", "like_count": 3} for i in range(5)]

    provider = InMemoryCorpusProvider(
        content_items=items,
        topics=[TopicRecord(1, "A"), TopicRecord(2, "B")],
        associations=[TopicAssociation(1, f"a{i}") for i in range(5)]
        + [TopicAssociation(2, f"b{i}") for i in range(5)],
    )

    graph = compute_topic_graph(provider, regularization_weight=10)

    assert graph.topic_named("A").engagement_multiplier == pytest.approx(20 / 15)
    assert graph.topic_named("B").engagement_multiplier == pytest.approx(12.5 / 15)
    assert [t.name for t in rank_topics(graph)] == ["A", "B"]


def test_zero_engagement_channel_does_not_poison_graph():
    """Zero-mean channels normalize to 0, leaving a finite multiplier."""
    provider = InMemoryCorpusProvider(
        content_items=[{"id": "a", "channel_id": "quiet"}, {"id": "b", "channel_id": "quiet"}],
        topics=[TopicRecord(1, "silence")],
        associations=[TopicAssociation(1, "a"), TopicAssociation(1, "b")],
    )

    graph = compute_topic_graph(provider)

    assert graph.topics[0].engagement_multiplier == pytest.approx(10 / 12)


def test_adaptive_threshold_through_engine():
    """Sizes [1,1,2,3,4] and max_nodes=2 keep the two largest topics."""
    sizes = [1, 1, 2, 3, 4]
    items, records, associations = [], [], []
    for topic_index, size in enumerate(sizes):
        records.append(TopicRecord(topic_index + 1, f"t{topic_index}"))
        for n in range(size):
            content_id = f"t{topic_index}-{n}"
            items.append({"id": content_id, "channel_id": "c", "view_count": 10, "duration_seconds": 60})
            associations.append(TopicAssociation(topic_index + 1, content_id))

    provider = InMemoryCorpusProvider(content_items=items, topics=records, associations=associations)
    graph = compute_topic_graph(provider, max_nodes=2)

    assert graph.effective_minimum_sample_size == 3
    assert [t.name for t in graph.topics] == ["t3", "t4"]


def test_graph_properties(sample_provider):
    """Ordering, range and relationship invariants on a mixed corpus."""
    graph = compute_topic_graph(sample_provider)

    assert graph.topics
    for position, topic in enumerate(graph.topics):
        assert topic.index == position
        weights = [(-c.weight, c.target_name) for c in topic.connections]
        assert weights == sorted(weights)
        for connection in topic.connections:
            assert connection.target != topic.index
            assert 0.0 < connection.weight <= 1.0
            assert graph.topics[connection.target].name == connection.target_name

    connected_pairs = {
        tuple(sorted((topic.index, c.target)))
        for topic in graph.topics
        for c in topic.connections
    }
    keys = [rel.key for rel in graph.relationships]
    assert len(keys) == len(set(keys)) == len(connected_pairs)
    assert set(keys) == connected_pairs


def test_categories_have_two_strong_incoming(sample_provider):
    """Every category has at least two incoming strong connections."""
    graph = compute_topic_graph(sample_provider)
    threshold = graph.config["categories"]["threshold"]

    for topic in graph.topics:
        incoming = [
            other.name
            for other in graph.topics
            for c in other.connections
            if c.target == topic.index and c.weight >= threshold
        ]
        assert list(topic.incoming_category_connections) == incoming
        if topic.is_category:
            assert len(incoming) >= 2


def test_dangling_associations_are_dropped(sample_provider):
    """Links to missing content do not count toward topic size."""
    graph = compute_topic_graph(sample_provider, max_nodes=20)
    recipes = graph.topic_named("recipes")

    assert "missing" not in recipes.video_ids


def test_deterministic_output(sample_provider):
    """Two runs on the same snapshot serialize identically."""
    first = json.dumps(compute_topic_graph(sample_provider).to_dict(), sort_keys=True)
    second = json.dumps(compute_topic_graph(sample_provider).to_dict(), sort_keys=True)
    assert first == second


def test_category_threshold_is_a_parameter(sample_provider):
    """A threshold of 1.0 admits only full containment."""
    graph = compute_topic_graph(sample_provider, category_threshold=1.0)
    for topic in graph.topics:
        for name in topic.incoming_category_connections:
            source = graph.topic_named(name)
            assert source.connection_to(topic.index).weight == 1.0


def test_engine_validates_config():
    """Invalid configuration is rejected up front."""
    with pytest.raises(ValueError):
        TopicGraphEngine(TopicGraphConfig.from_params(max_nodes=0))


def test_engine_records_config(sample_provider):
    """The graph carries the config it was built with."""
    config = TopicGraphConfig.from_params(max_nodes=4)
    graph = TopicGraphEngine(config).compute_from_provider(sample_provider)

    assert graph.config["aggregation"]["max_nodes"] == 4
    assert len(graph.topics) <= 4 or graph.effective_minimum_sample_size > 100
