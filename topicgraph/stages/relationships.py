"""Relationship Materializer: collapses directed connections into graph edges."""

import logging

from topicgraph.models import Relationship, Topic
from topicgraph.stages.base import BaseStage, StageResult

logger = logging.getLogger(__name__)


class RelationshipMaterializer(BaseStage):
    """Builds one undirected relationship per connected topic pair.

    The first direction encountered (canonical topic order, then each
    topic's connection order) fixes ``source``, ``target`` and the label.
    """

    @property
    def name(self) -> str:
        return "Relationship Materializer"

    def run(self, topics: list[Topic]) -> StageResult:
        relationships: list[Relationship] = []
        seen: set[tuple[int, int]] = set()

        for topic in topics:
            for connection in topic.connections:
                target_index = connection.target
                if not 0 <= target_index < len(topics):
                    continue

                key = (min(topic.index, target_index), max(topic.index, target_index))
                if key in seen:
                    continue
                seen.add(key)

                reverse = topics[target_index].connection_to(topic.index)
                forward_strength = connection.weight
                reverse_strength = reverse.weight if reverse is not None else 0.0

                relationships.append(Relationship(
                    source=topic.index,
                    target=target_index,
                    forward_strength=forward_strength,
                    reverse_strength=reverse_strength,
                    max_strength=max(forward_strength, reverse_strength),
                    label=f"{topic.name} - {connection.target_name}",
                ))

        logger.info(f"{self.name}: {len(relationships)} relationships")
        return StageResult(topics=topics, relationships=relationships)
