"""TopicGraph: which subjects lift audience engagement.

Scores content against its channel's baseline, aggregates the scores per
topic into a smoothed engagement multiplier, and maps how topics co-occur,
including which topics act as umbrella categories.
"""

__version__ = "1.0.0"

from topicgraph.models import (
    ContentItem,
    TopicRecord,
    TopicAssociation,
    TopVideo,
    Topic,
    Connection,
    Relationship,
    TopicGraph,
)
from topicgraph.config import TopicGraphConfig
from topicgraph.engagement import EngagementScorer, calculate_engagement_score
from topicgraph.engine import TopicGraphEngine, compute_topic_graph, rank_topics

__all__ = [
    "ContentItem",
    "TopicRecord",
    "TopicAssociation",
    "TopVideo",
    "Topic",
    "Connection",
    "Relationship",
    "TopicGraph",
    "TopicGraphConfig",
    "EngagementScorer",
    "calculate_engagement_score",
    "TopicGraphEngine",
    "compute_topic_graph",
    "rank_topics",
]
