"""Corpus provider interface and implementations.

The engine never reads storage itself; a provider hands it the full
snapshot of content items, topics and topic associations in memory.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union
import json
import logging

from topicgraph.models import ContentItem, TopicAssociation, TopicRecord

logger = logging.getLogger(__name__)


class CorpusProvider(ABC):
    """Abstract interface for the storage layer the engine reads from."""

    @abstractmethod
    def get_all_content_items(self) -> List[ContentItem]:
        """All content items with channel linkage and raw metrics."""
        pass

    @abstractmethod
    def get_all_topics(self) -> List[TopicRecord]:
        """All known topics, in discovery order."""
        pass

    @abstractmethod
    def get_all_topic_associations(self) -> List[TopicAssociation]:
        """All links between a topic id and a content id."""
        pass


def _topic_record(row: Union[TopicRecord, dict[str, Any]]) -> TopicRecord:
    if isinstance(row, TopicRecord):
        return row
    return TopicRecord(id=row["id"], name=row["name"])


def _association(row: Union[TopicAssociation, dict[str, Any]]) -> TopicAssociation:
    if isinstance(row, TopicAssociation):
        return row
    return TopicAssociation(
        topic_id=row.get("topic_id"),
        content_id=str(row.get("content_id", row.get("video_id"))),
        source=row.get("source") or "author",
    )


class InMemoryCorpusProvider(CorpusProvider):
    """Provider over records already held in memory.

    Accepts model instances or plain dict rows. Content items are rebuilt
    on every call so each engine run scores a fresh copy.
    """

    def __init__(
        self,
        content_items: Optional[Iterable[Union[ContentItem, dict[str, Any]]]] = None,
        topics: Optional[Iterable[Union[TopicRecord, dict[str, Any]]]] = None,
        associations: Optional[Iterable[Union[TopicAssociation, dict[str, Any]]]] = None,
    ):
        self._content_rows = list(content_items or [])
        self._topics = [_topic_record(row) for row in topics or []]
        self._associations = [_association(row) for row in associations or []]

    def get_all_content_items(self) -> List[ContentItem]:
        items = []
        for row in self._content_rows:
            if isinstance(row, ContentItem):
                items.append(ContentItem(
                    id=row.id,
                    channel_id=row.channel_id,
                    title=row.title,
                    view_count=row.view_count,
                    like_count=row.like_count,
                    comment_count=row.comment_count,
                    duration_seconds=row.duration_seconds,
                    published_at=row.published_at,
                ))
            elif row.get("id") is None:
                logger.warning(f"Skipping content record without an id: {row.get('title')!r}")
            else:
                items.append(ContentItem.from_record(row))
        return items

    def get_all_topics(self) -> List[TopicRecord]:
        return list(self._topics)

    def get_all_topic_associations(self) -> List[TopicAssociation]:
        return list(self._associations)


class JSONCorpusProvider(InMemoryCorpusProvider):
    """Provider reading a snapshot file.

    Expected layout::

        {
          "content_items": [{"id": ..., "channel_id": ..., "view_count": ...}],
          "topics": [{"id": 1, "name": "cooking"}],
          "associations": [{"topic_id": 1, "content_id": "abc", "source": "ai"}]
        }

    ``videos`` and ``video_topics`` are accepted as aliases for the backend's
    table names.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        with open(self.path, 'r') as f:
            snapshot = json.load(f)

        super().__init__(
            content_items=snapshot.get("content_items", snapshot.get("videos", [])),
            topics=snapshot.get("topics", []),
            associations=snapshot.get("associations", snapshot.get("video_topics", [])),
        )
        logger.info(
            f"Loaded snapshot {self.path}: {len(self._content_rows)} content items, "
            f"{len(self._topics)} topics, {len(self._associations)} associations"
        )
