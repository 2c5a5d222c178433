"""Tests for the Relationship Materializer."""

import pytest

from topicgraph.config import ConnectionConfig
from topicgraph.models import Connection
from topicgraph.stages import ConnectionBuilder, RelationshipMaterializer


def test_one_relationship_per_pair(make_topic):
    """Both directions of a pair collapse into one relationship."""
    topics = [
        make_topic("A", 0, [1, 2, 3]),
        make_topic("B", 1, [2, 3, 4, 5]),
        make_topic("C", 2, [9]),
    ]
    connected = ConnectionBuilder(ConnectionConfig()).run(topics).topics

    relationships = RelationshipMaterializer().run(connected).relationships

    assert len(relationships) == 1
    rel = relationships[0]
    assert (rel.source, rel.target) == (0, 1)
    assert rel.forward_strength == pytest.approx(2 / 3)
    assert rel.reverse_strength == 0.5
    assert rel.max_strength == pytest.approx(2 / 3)
    assert rel.label == "A - B"


def test_missing_reverse_connection(make_topic):
    """A one-way connection still yields a relationship, oriented by first encounter."""
    topics = [
        make_topic("Zeta", 0, [1]),
        make_topic("Alpha", 1, [1, 2], connections=(Connection(target=0, target_name="Zeta", weight=0.3),)),
    ]

    relationships = RelationshipMaterializer().run(topics).relationships

    assert len(relationships) == 1
    rel = relationships[0]
    assert (rel.source, rel.target) == (1, 0)
    assert rel.key == (0, 1)
    assert rel.forward_strength == 0.3
    assert rel.reverse_strength == 0.0
    assert rel.max_strength == 0.3
    assert rel.label == "Alpha - Zeta"


def test_reverse_stronger_sets_max(make_topic):
    """max_strength takes the stronger direction."""
    topics = [
        make_topic("big", 0, range(10), connections=(Connection(1, "small", 0.2),)),
        make_topic("small", 1, range(2), connections=(Connection(0, "big", 1.0),)),
    ]

    rel = RelationshipMaterializer().run(topics).relationships[0]

    assert rel.forward_strength == 0.2
    assert rel.reverse_strength == 1.0
    assert rel.max_strength == 1.0


def test_relationship_count_matches_connected_pairs(make_topic):
    """One relationship for each unordered pair with any connection."""
    topics = [
        make_topic("a", 0, [1, 2, 3]),
        make_topic("b", 1, [3, 4]),
        make_topic("c", 2, [4, 5]),
        make_topic("d", 3, [1, 6]),
        make_topic("e", 4, [7]),
    ]
    connected = ConnectionBuilder(ConnectionConfig()).run(topics).topics

    relationships = RelationshipMaterializer().run(connected).relationships
    keys = [rel.key for rel in relationships]

    expected = {
        tuple(sorted((topic.index, c.target)))
        for topic in connected
        for c in topic.connections
    }
    assert len(keys) == len(set(keys))
    assert set(keys) == expected == {(0, 1), (1, 2), (0, 3)}
    assert all(source != target for source, target in keys)
