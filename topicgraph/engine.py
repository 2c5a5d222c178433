"""Topic engagement graph engine.

Orchestrates:
1. Engagement scoring and per-channel normalization
2. Topic aggregation (adaptive node budget + smoothed multiplier)
3. Directed connection building
4. Category detection
5. Relationship materialization

Every call recomputes the graph from a full snapshot; nothing is cached.
"""

from typing import Iterable, List, Optional
import logging

from topicgraph.config import TopicGraphConfig
from topicgraph.engagement import EngagementScorer
from topicgraph.models import ContentItem, Topic, TopicAssociation, TopicGraph, TopicRecord
from topicgraph.providers.corpus import CorpusProvider
from topicgraph.stages import (
    CategoryDetector,
    ConnectionBuilder,
    RelationshipMaterializer,
    TopicAggregator,
    assemble_topics,
)

logger = logging.getLogger(__name__)


class TopicGraphEngine:
    """Computes the topic engagement graph for a corpus snapshot."""

    def __init__(self, config: Optional[TopicGraphConfig] = None):
        """Initialize engine with configuration."""
        self.config = config or TopicGraphConfig.default()
        self.config.validate()

        self.scorer = EngagementScorer(self.config.engagement)
        self.stages = [
            TopicAggregator(self.config.aggregation),
            ConnectionBuilder(self.config.connections),
            CategoryDetector(self.config.categories),
            RelationshipMaterializer(),
        ]

    def compute(
        self,
        content_items: Iterable[ContentItem],
        topic_records: Iterable[TopicRecord],
        associations: Iterable[TopicAssociation],
    ) -> TopicGraph:
        """Build the graph from in-memory records.

        Content items are scored in place.

        Returns:
            TopicGraph whose topic positions match relationship indices
        """
        content_items = list(content_items)
        topic_records = list(topic_records)
        config_snapshot = self.config.to_dict()

        if not content_items or not topic_records:
            logger.info("Empty corpus, returning empty topic graph")
            return TopicGraph.empty(config_snapshot)

        channel_means = self.scorer.score_items(content_items)
        logger.info(f"Scored {len(content_items)} content items across {len(channel_means)} channels")

        topics = assemble_topics(
            topic_records,
            associations,
            content_items,
            canonical_order=self.config.canonical_order,
        )

        graph = TopicGraph(
            effective_minimum_sample_size=self.config.aggregation.minimum_sample_size,
            config=config_snapshot,
        )
        for stage in self.stages:
            result = stage.run(topics)
            topics = result.topics
            if result.relationships:
                graph.relationships = result.relationships
            if 'effective_minimum_sample_size' in result.metadata:
                graph.effective_minimum_sample_size = result.metadata['effective_minimum_sample_size']

        graph.topics = topics
        return graph

    def compute_from_provider(self, provider: CorpusProvider) -> TopicGraph:
        """Pull a full snapshot from ``provider`` and build the graph."""
        return self.compute(
            provider.get_all_content_items(),
            provider.get_all_topics(),
            provider.get_all_topic_associations(),
        )


def compute_topic_graph(
    provider: CorpusProvider,
    regularization_weight: float = 10,
    minimum_sample_size: int = 1,
    max_nodes: int = 10,
    category_threshold: float = 0.5,
    config: Optional[TopicGraphConfig] = None,
) -> TopicGraph:
    """Compute the topic graph for everything ``provider`` holds.

    When ``config`` is given its values win over the keyword parameters.
    """
    if config is None:
        config = TopicGraphConfig.from_params(
            regularization_weight=regularization_weight,
            minimum_sample_size=minimum_sample_size,
            max_nodes=max_nodes,
            category_threshold=category_threshold,
        )
    return TopicGraphEngine(config).compute_from_provider(provider)


def rank_topics(graph: TopicGraph) -> List[Topic]:
    """Topics ordered by how strongly they lift engagement.

    Highest multiplier first; ties by name.
    """
    return sorted(graph.topics, key=lambda topic: (-topic.engagement_multiplier, topic.name))
