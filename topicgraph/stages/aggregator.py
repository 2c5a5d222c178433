"""Topic Aggregator: groups content by topic and smooths its engagement.

multiplier(T) = (Σ normalized(v) + R · 1.0) / (|T| + R)

R virtual samples at the neutral multiplier 1.0 keep topics with a handful
of videos from showing extreme multipliers.
"""

from dataclasses import replace
from typing import Iterable
import logging

from topicgraph.config import AggregationConfig, CanonicalOrder
from topicgraph.models import (
    ContentItem,
    Topic,
    TopicAssociation,
    TopicRecord,
    TopVideo,
)
from topicgraph.stages.base import BaseStage, StageResult

logger = logging.getLogger(__name__)


def assemble_topics(
    topic_records: Iterable[TopicRecord],
    associations: Iterable[TopicAssociation],
    content_items: Iterable[ContentItem],
    canonical_order: CanonicalOrder = "discovery",
) -> list[Topic]:
    """Resolve associations into topics carrying their content items.

    Associations pointing at unknown content or unknown topics are dropped.
    A content item linked to a topic more than once (e.g. by both the author
    and the inference pipeline) counts once. Topics left without content are
    excluded.

    Returns:
        Topics in canonical order, indexed 0..n-1
    """
    items_by_id = {item.id: item for item in content_items}

    # Insertion order of ``members`` is discovery order.
    names_by_id: dict = {}
    members: dict[str, dict[str, ContentItem]] = {}
    for record in topic_records:
        names_by_id[record.id] = record.name
        members.setdefault(record.name, {})

    dangling = 0
    for association in associations:
        name = names_by_id.get(association.topic_id)
        item = items_by_id.get(str(association.content_id))
        if name is None or item is None:
            dangling += 1
            continue
        members[name].setdefault(item.id, item)

    if dangling:
        logger.warning(f"Dropped {dangling} dangling topic associations")

    ordered_names = list(members)
    if canonical_order == "name":
        ordered_names.sort()

    topics = []
    for name in ordered_names:
        videos = tuple(members[name].values())
        if not videos:
            continue
        topics.append(Topic(name=name, index=len(topics), videos=videos))

    logger.debug(f"Assembled {len(topics)} topics with content")
    return topics


def regularized_multiplier(normalized_scores: list[float], regularization_weight: float) -> float:
    """Smoothed mean of normalized scores with R virtual samples at 1.0."""
    denominator = len(normalized_scores) + regularization_weight
    if denominator == 0:
        return 1.0
    return (sum(normalized_scores) + regularization_weight * 1.0) / denominator


class TopicAggregator(BaseStage):
    """Filters topics to the node budget and computes their multipliers."""

    def __init__(self, config: AggregationConfig):
        super().__init__(config)
        self.config: AggregationConfig = config

    @property
    def name(self) -> str:
        return "Topic Aggregator"

    def select_qualifying(self, topics: list[Topic]) -> tuple[list[Topic], int, list[tuple[int, int]]]:
        """Raise the minimum sample size until the topic set fits ``max_nodes``.

        Gives up once the threshold exceeds the ceiling and keeps whatever
        qualifies at that point, even if it is still over budget.

        Returns:
            (qualifying topics, effective threshold, [(threshold, count), ...])
        """
        threshold = self.config.minimum_sample_size
        qualifying = [t for t in topics if t.video_count >= threshold]
        progression = [(threshold, len(qualifying))]

        while len(qualifying) > self.config.max_nodes:
            threshold += 1
            qualifying = [t for t in topics if t.video_count >= threshold]
            progression.append((threshold, len(qualifying)))

            if threshold > self.config.sample_size_ceiling:
                logger.warning(
                    f"Minimum sample size passed {self.config.sample_size_ceiling}; "
                    f"keeping {len(qualifying)} topics (max_nodes={self.config.max_nodes})"
                )
                break

        return qualifying, threshold, progression

    def top_videos(self, topic: Topic) -> tuple[TopVideo, ...]:
        """Best content by raw engagement score, ties keep association order."""
        ranked = sorted(topic.videos, key=lambda item: item.engagement_score, reverse=True)
        return tuple(TopVideo.from_item(item) for item in ranked[:self.config.top_videos])

    def run(self, topics: list[Topic]) -> StageResult:
        qualifying, threshold, progression = self.select_qualifying(topics)

        aggregated = []
        for topic in qualifying:
            multiplier = regularized_multiplier(
                [item.normalized_engagement_score for item in topic.videos],
                self.config.regularization_weight,
            )
            aggregated.append(replace(
                topic,
                index=len(aggregated),
                engagement_multiplier=multiplier,
                top_videos=self.top_videos(topic),
            ))

        logger.info(
            f"{self.name}: {len(aggregated)}/{len(topics)} topics kept "
            f"(minimum sample size {threshold})"
        )

        return StageResult(
            topics=aggregated,
            metadata={
                'effective_minimum_sample_size': threshold,
                'threshold_progression': progression,
                'candidate_topics': len(topics),
            },
        )
