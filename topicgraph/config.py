"""Configuration management for TopicGraph engine parameters."""

from dataclasses import dataclass, field, asdict
from typing import Any, Literal


CanonicalOrder = Literal["discovery", "name"]


@dataclass
class EngagementWeights:
    """Weights and toggles for the per-item engagement score."""

    like_weight: float = 150.0
    comment_weight: float = 500.0
    include_duration: bool = True  # views * minutes watched proxy
    include_likes_comments: bool = True

    def validate(self) -> None:
        """Ensure weights are non-negative."""
        if self.like_weight < 0 or self.comment_weight < 0:
            raise ValueError("Engagement weights must be non-negative")


@dataclass
class AggregationConfig:
    """Configuration for the Topic Aggregator."""

    regularization_weight: float = 10.0  # virtual samples at multiplier 1.0
    minimum_sample_size: int = 1
    max_nodes: int = 10
    sample_size_ceiling: int = 100  # adaptive threshold stops once exceeded
    top_videos: int = 3


@dataclass
class ConnectionConfig:
    """Configuration for the Connection Builder."""

    # Older notes describe this as "top 5"; the cap in use is 50.
    max_connections: int = 50


@dataclass
class CategoryConfig:
    """Configuration for the Category Detector."""

    # Older notes describe this as 80%; the threshold in use is 0.5.
    threshold: float = 0.5
    min_incoming_connections: int = 2


@dataclass
class TopicGraphConfig:
    """Master configuration for the topic graph engine.

    Consolidates every stage's parameters so a run can be reproduced from
    its serialized config.
    """

    engagement: EngagementWeights = field(default_factory=EngagementWeights)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    connections: ConnectionConfig = field(default_factory=ConnectionConfig)
    categories: CategoryConfig = field(default_factory=CategoryConfig)

    # "discovery" keeps the order storage returned topics in; "name" sorts by name.
    canonical_order: CanonicalOrder = "discovery"

    def validate(self) -> None:
        """Validate all configuration parameters."""
        self.engagement.validate()

        if self.aggregation.regularization_weight < 0:
            raise ValueError("regularization_weight must be non-negative")
        if self.aggregation.max_nodes < 1:
            raise ValueError("max_nodes must be at least 1")
        if self.aggregation.top_videos < 0:
            raise ValueError("top_videos must be non-negative")
        if self.connections.max_connections <= 0:
            raise ValueError("max_connections must be positive")
        if not 0.0 <= self.categories.threshold <= 1.0:
            raise ValueError("category threshold must be within [0, 1]")
        if self.categories.min_incoming_connections < 1:
            raise ValueError("min_incoming_connections must be at least 1")
        if self.canonical_order not in ("discovery", "name"):
            raise ValueError(f"Unknown canonical order: {self.canonical_order}")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def default(cls) -> "TopicGraphConfig":
        """Create a configuration with all default values."""
        return cls()

    @classmethod
    def from_params(
        cls,
        regularization_weight: float = 10.0,
        minimum_sample_size: int = 1,
        max_nodes: int = 10,
        category_threshold: float = 0.5,
    ) -> "TopicGraphConfig":
        """Create a configuration from the graph endpoint's parameters."""
        config = cls()
        config.aggregation.regularization_weight = regularization_weight
        config.aggregation.minimum_sample_size = minimum_sample_size
        config.aggregation.max_nodes = max_nodes
        config.categories.threshold = category_threshold
        return config
