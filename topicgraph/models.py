"""Core data models for TopicGraph."""

from dataclasses import dataclass, field, asdict
import math
from typing import Any, Optional


def as_number(value: Any) -> float:
    """Coerce a raw metric to a float, treating missing or malformed values as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


@dataclass
class ContentItem:
    """A single video or post published by a channel."""

    id: str
    channel_id: str
    title: str = ""

    # Raw metrics
    view_count: float = 0.0
    like_count: float = 0.0
    comment_count: float = 0.0
    duration_seconds: float = 0.0
    published_at: Optional[str] = None

    # Attached by EngagementScorer
    engagement_score: float = 0.0
    normalized_engagement_score: float = 0.0

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ContentItem":
        """Build a content item from a storage row.

        Accepts both snake_case and the camelCase column names used by the
        scraping backend (``viewCount``, ``channelId`` ...).
        """
        def pick(*keys: str) -> Any:
            for key in keys:
                if key in record and record[key] is not None:
                    return record[key]
            return None

        item_id = pick("id")
        if item_id is None:
            raise ValueError("Content record has no id")

        channel_id = pick("channel_id", "channelId")
        return cls(
            id=str(item_id),
            channel_id=str(channel_id) if channel_id is not None else "",
            title=pick("title") or "",
            view_count=as_number(pick("view_count", "viewCount")),
            like_count=as_number(pick("like_count", "likeCount")),
            comment_count=as_number(pick("comment_count", "commentCount")),
            duration_seconds=as_number(pick("duration_seconds", "durationSeconds")),
            published_at=pick("published_at", "publishedAt"),
        )


@dataclass(frozen=True)
class TopicRecord:
    """A topic row as supplied by storage."""

    id: Any
    name: str


@dataclass(frozen=True)
class TopicAssociation:
    """Links a topic to a content item."""

    topic_id: Any
    content_id: str
    source: str = "author"  # "author" (hashtags) or "ai" (inferred)


@dataclass(frozen=True)
class TopVideo:
    """Display-ready summary of a top performing content item."""

    title: str
    views: float
    comments: float
    likes: float
    id: str
    published_at: Optional[str]

    @classmethod
    def from_item(cls, item: ContentItem) -> "TopVideo":
        return cls(
            title=item.title,
            views=item.view_count,
            comments=item.comment_count,
            likes=item.like_count,
            id=item.id,
            published_at=item.published_at,
        )


@dataclass(frozen=True)
class Connection:
    """Directed co-occurrence edge to another topic, by canonical index."""

    target: int
    target_name: str
    weight: float  # fraction of the source topic's content also tagged with target


@dataclass(frozen=True)
class Topic:
    """A named subject and everything derived for it during one engine run."""

    name: str
    index: int  # position in the canonical topic list
    videos: tuple[ContentItem, ...]
    engagement_multiplier: float = 0.0
    top_videos: tuple[TopVideo, ...] = ()
    connections: tuple[Connection, ...] = ()
    is_category: bool = False
    incoming_category_connections: tuple[str, ...] = ()

    @property
    def video_count(self) -> int:
        return len(self.videos)

    @property
    def video_ids(self) -> frozenset[str]:
        """Content identifiers carried by this topic."""
        return frozenset(item.id for item in self.videos)

    def connection_to(self, index: int) -> Optional[Connection]:
        """Outgoing connection to the topic at ``index``, if one survived filtering."""
        for connection in self.connections:
            if connection.target == index:
                return connection
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'name': self.name,
            'index': self.index,
            'video_count': self.video_count,
            'engagement_multiplier': self.engagement_multiplier,
            'top_videos': [asdict(video) for video in self.top_videos],
            'connections': [asdict(connection) for connection in self.connections],
            'is_category': self.is_category,
            'incoming_category_connections': list(self.incoming_category_connections),
        }


@dataclass(frozen=True)
class Relationship:
    """Undirected presentation edge between two topics."""

    source: int
    target: int
    forward_strength: float  # source -> target
    reverse_strength: float  # target -> source
    max_strength: float  # rendering emphasis only
    label: str

    @property
    def key(self) -> tuple[int, int]:
        """Unordered pair key, lower index first."""
        return (min(self.source, self.target), max(self.source, self.target))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TopicGraph:
    """Result of one engine invocation."""

    topics: list[Topic] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    # Run metadata
    effective_minimum_sample_size: int = 0
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def categories(self) -> list[Topic]:
        return [topic for topic in self.topics if topic.is_category]

    def topic_named(self, name: str) -> Optional[Topic]:
        for topic in self.topics:
            if topic.name == name:
                return topic
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'topics': [topic.to_dict() for topic in self.topics],
            'relationships': [rel.to_dict() for rel in self.relationships],
            'effective_minimum_sample_size': self.effective_minimum_sample_size,
            'config': self.config,
        }

    @classmethod
    def empty(cls, config: Optional[dict[str, Any]] = None) -> "TopicGraph":
        return cls(config=config or {})
