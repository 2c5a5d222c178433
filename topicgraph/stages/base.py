"""Base classes for topic graph stages."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from topicgraph.models import Relationship, Topic


@dataclass
class StageResult:
    """Result of a stage.

    Carries the enriched topic list forward plus anything the stage wants
    to report about its run.
    """

    topics: list[Topic]
    relationships: list[Relationship] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


class BaseStage(ABC):
    """Abstract base class for engine stages.

    Stages run strictly in order and only consume what the previous stage
    produced. Each takes its own config section.
    """

    def __init__(self, config: Any = None):
        """Initialize with stage-specific configuration."""
        self.config = config

    @abstractmethod
    def run(self, topics: list[Topic]) -> StageResult:
        """Run the stage over the canonical topic list.

        Args:
            topics: Topics in canonical order, ``topic.index`` matching position

        Returns:
            StageResult with the enriched topics
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this stage."""
        pass
