"""Connection Builder: directed co-occurrence between topics.

weight(A→B) = |videos(A) ∩ videos(B)| / |videos(A)|

Asymmetric on purpose: a small topic can sit almost entirely inside a
large one without the reverse being true.
"""

from dataclasses import replace
import logging

from topicgraph.config import ConnectionConfig
from topicgraph.models import Connection, Topic
from topicgraph.stages.base import BaseStage, StageResult

logger = logging.getLogger(__name__)


def co_occurrence_weight(source: Topic, target: Topic) -> float:
    """Fraction of ``source`` content that is also tagged with ``target``."""
    source_ids = source.video_ids
    if not source_ids:
        return 0.0
    return len(source_ids & target.video_ids) / len(source_ids)


class ConnectionBuilder(BaseStage):
    """Computes every topic's outgoing connections.

    Quadratic in the number of topics, which the aggregator caps at
    ``max_nodes``.
    """

    def __init__(self, config: ConnectionConfig):
        super().__init__(config)
        self.config: ConnectionConfig = config

    @property
    def name(self) -> str:
        return "Connection Builder"

    def build_connections(self, source: Topic, topics: list[Topic]) -> tuple[Connection, ...]:
        """Nonzero connections from ``source``, strongest first.

        Equal weights are ordered by target name so runs are reproducible.
        """
        connections = []
        for target in topics:
            if target.index == source.index:
                continue
            weight = co_occurrence_weight(source, target)
            if weight > 0:
                connections.append(Connection(target=target.index, target_name=target.name, weight=weight))

        connections.sort(key=lambda c: (-c.weight, c.target_name))
        return tuple(connections[:self.config.max_connections])

    def run(self, topics: list[Topic]) -> StageResult:
        connected = [replace(topic, connections=self.build_connections(topic, topics)) for topic in topics]

        total = sum(len(topic.connections) for topic in connected)
        logger.info(f"{self.name}: {total} directed connections across {len(connected)} topics")

        return StageResult(topics=connected, metadata={'connection_count': total})
