"""Category Detector: infers umbrella topics from strong incoming connections.

A topic is a category candidate when at least ``min_incoming_connections``
other topics connect into it with weight >= ``threshold``. When two
candidates are strongly connected, the one with fewer videos loses (on a
tie, the one later in canonical order). A loss is final even if the winner
is later knocked out by a third candidate.
"""

from collections import defaultdict
from dataclasses import replace
import logging

from topicgraph.config import CategoryConfig
from topicgraph.models import Topic
from topicgraph.stages.base import BaseStage, StageResult

logger = logging.getLogger(__name__)


class CategoryDetector(BaseStage):
    """Marks topics that behave as categories."""

    def __init__(self, config: CategoryConfig):
        super().__init__(config)
        self.config: CategoryConfig = config

    @property
    def name(self) -> str:
        return "Category Detector"

    def strong_edges(self, topics: list[Topic]) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        """Collect connections at or above the threshold.

        Returns:
            (incoming, outgoing) maps of topic name to topic names
        """
        incoming: dict[str, list[str]] = defaultdict(list)
        outgoing: dict[str, list[str]] = defaultdict(list)
        for topic in topics:
            for connection in topic.connections:
                if connection.weight >= self.config.threshold:
                    incoming[connection.target_name].append(topic.name)
                    outgoing[topic.name].append(connection.target_name)
        return dict(incoming), dict(outgoing)

    def resolve_conflicts(
        self,
        candidates: dict[str, Topic],
        outgoing: dict[str, list[str]],
    ) -> set[str]:
        """Names of candidates that lose to another candidate they connect to."""
        disqualified: set[str] = set()
        for name, topic in candidates.items():
            for other_name in outgoing.get(name, []):
                other = candidates.get(other_name)
                if other is None:
                    continue

                if topic.video_count < other.video_count:
                    disqualified.add(name)
                elif topic.video_count > other.video_count:
                    disqualified.add(other_name)
                elif topic.index > other.index:
                    disqualified.add(name)
                else:
                    disqualified.add(other_name)
        return disqualified

    def run(self, topics: list[Topic]) -> StageResult:
        incoming, outgoing = self.strong_edges(topics)

        # Canonical order, so iteration is reproducible
        candidates = {
            topic.name: topic
            for topic in topics
            if len(incoming.get(topic.name, [])) >= self.config.min_incoming_connections
        }
        disqualified = self.resolve_conflicts(candidates, outgoing)
        categories = [name for name in candidates if name not in disqualified]

        annotated = [
            replace(
                topic,
                is_category=topic.name in categories,
                incoming_category_connections=tuple(incoming.get(topic.name, [])),
            )
            for topic in topics
        ]

        logger.info(
            f"{self.name}: {len(categories)} categories from {len(candidates)} candidates "
            f"(threshold {self.config.threshold})"
        )
        if disqualified:
            logger.debug(f"Disqualified category candidates: {sorted(disqualified)}")

        return StageResult(
            topics=annotated,
            metadata={
                'categories': categories,
                'candidates': list(candidates),
                'disqualified': sorted(disqualified),
            },
        )
