"""Engine stages.

Each stage (aggregate, connect, categorize, materialize) is an independent
module that can be configured and tested on its own. Data flows strictly
forward through them.
"""

from topicgraph.stages.base import BaseStage, StageResult
from topicgraph.stages.aggregator import TopicAggregator, assemble_topics, regularized_multiplier
from topicgraph.stages.connections import ConnectionBuilder, co_occurrence_weight
from topicgraph.stages.categories import CategoryDetector
from topicgraph.stages.relationships import RelationshipMaterializer

__all__ = [
    "BaseStage",
    "StageResult",
    "TopicAggregator",
    "assemble_topics",
    "regularized_multiplier",
    "ConnectionBuilder",
    "co_occurrence_weight",
    "CategoryDetector",
    "RelationshipMaterializer",
]
