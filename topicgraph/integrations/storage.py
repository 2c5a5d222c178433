"""SQLite storage for topic graph corpora."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    String,
    Float,
    DateTime,
    ForeignKey,
    text,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from topicgraph.config import EngagementWeights
from topicgraph.engagement import engagement_sql_expression
from topicgraph.models import ContentItem, TopicAssociation, TopicRecord
from topicgraph.providers.corpus import CorpusProvider

logger = logging.getLogger(__name__)

Base = declarative_base()


class ContentItemRecord(Base):
    """Content item metadata and analytics."""
    __tablename__ = 'content_items'

    id = Column(String, primary_key=True)
    channel_id = Column(String, index=True)
    title = Column(String)
    published_at = Column(String)
    fetched_at = Column(DateTime, default=datetime.utcnow)

    # Analytics
    view_count = Column(Float, default=0)
    like_count = Column(Float, default=0)
    comment_count = Column(Float, default=0)
    duration_seconds = Column(Float, default=0)


class TopicRow(Base):
    """Topic names; ids grow in discovery order."""
    __tablename__ = 'topics'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class TopicAssociationRecord(Base):
    """Links content to topics; ``source`` is "author" or "ai"."""
    __tablename__ = 'topic_associations'

    content_id = Column(String, ForeignKey('content_items.id'), primary_key=True)
    topic_id = Column(Integer, ForeignKey('topics.id'), primary_key=True, index=True)
    source = Column(String, primary_key=True, default='author', index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


def normalize_topic_name(name: str) -> str:
    return name.lower().strip()


class SQLiteStorage(CorpusProvider):
    """SQLite-backed corpus for the topic graph engine."""

    def __init__(self, db_path: str = "topicgraph.db"):
        """Initialize SQLite storage.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.engine = create_engine(f'sqlite:///{db_path}')
        Base.metadata.create_all(self.engine)

        Session = sessionmaker(bind=self.engine)
        self.session = Session()

        logger.info(f"Initialized SQLite storage at {db_path}")

    def __enter__(self) -> "SQLiteStorage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Writes

    def add_content_item(self, item: ContentItem) -> None:
        """Insert or update a content item."""
        existing = self.session.query(ContentItemRecord).filter_by(id=item.id).first()

        if existing:
            existing.channel_id = item.channel_id
            existing.title = item.title
            existing.view_count = item.view_count
            existing.like_count = item.like_count
            existing.comment_count = item.comment_count
            existing.duration_seconds = item.duration_seconds
            existing.published_at = item.published_at
            existing.fetched_at = datetime.utcnow()
        else:
            self.session.add(ContentItemRecord(
                id=item.id,
                channel_id=item.channel_id,
                title=item.title,
                published_at=item.published_at,
                view_count=item.view_count,
                like_count=item.like_count,
                comment_count=item.comment_count,
                duration_seconds=item.duration_seconds,
            ))

        self.session.commit()
        logger.debug(f"Saved content item: {item.id}")

    def add_topic(self, name: str) -> Optional[int]:
        """Return the id of topic ``name``, creating it if needed.

        Names are lowercased and trimmed; blank names are ignored.
        """
        normalized = normalize_topic_name(name)
        if not normalized:
            return None

        row = self.session.query(TopicRow).filter_by(name=normalized).first()
        if row is None:
            row = TopicRow(name=normalized)
            self.session.add(row)
            self.session.commit()
        return row.id

    def associate(self, content_id: str, topic_names: Iterable[str], source: str = 'author') -> None:
        """Replace the ``source`` topics of a content item with ``topic_names``."""
        topic_names = list(topic_names)
        if not topic_names:
            return

        (
            self.session.query(TopicAssociationRecord)
            .filter_by(content_id=content_id, source=source)
            .delete()
        )
        linked = set()
        for name in topic_names:
            topic_id = self.add_topic(name)
            if topic_id is None or topic_id in linked:
                continue
            linked.add(topic_id)
            self.session.add(TopicAssociationRecord(content_id=content_id, topic_id=topic_id, source=source))

        self.session.commit()
        logger.debug(f"Associated {content_id} with {len(linked)} {source} topics")

    def import_snapshot(self, provider: CorpusProvider) -> Dict[str, int]:
        """Copy another provider's corpus into this database.

        Topic ids are remapped by name. Associations to unknown topics are skipped.

        Returns:
            Counts of imported content items, topics and associations
        """
        items = provider.get_all_content_items()
        for item in items:
            self.add_content_item(item)

        id_map: Dict[Any, int] = {}
        for record in provider.get_all_topics():
            topic_id = self.add_topic(record.name)
            if topic_id is not None:
                id_map[record.id] = topic_id

        imported = 0
        for association in provider.get_all_topic_associations():
            topic_id = id_map.get(association.topic_id)
            if topic_id is None:
                continue
            exists = (
                self.session.query(TopicAssociationRecord)
                .filter_by(content_id=association.content_id, topic_id=topic_id, source=association.source)
                .first()
            )
            if exists is None:
                self.session.add(TopicAssociationRecord(
                    content_id=association.content_id,
                    topic_id=topic_id,
                    source=association.source,
                ))
                imported += 1
        self.session.commit()

        counts = {'content_items': len(items), 'topics': len(id_map), 'associations': imported}
        logger.info(f"Imported snapshot into {self.db_path}: {counts}")
        return counts

    # CorpusProvider

    def get_all_content_items(self) -> List[ContentItem]:
        return [
            ContentItem.from_record({
                'id': row.id,
                'channel_id': row.channel_id,
                'title': row.title,
                'view_count': row.view_count,
                'like_count': row.like_count,
                'comment_count': row.comment_count,
                'duration_seconds': row.duration_seconds,
                'published_at': row.published_at,
            })
            for row in self.session.query(ContentItemRecord).order_by(ContentItemRecord.id).all()
        ]

    def get_all_topics(self) -> List[TopicRecord]:
        """Topics ordered by id, which is discovery order."""
        return [
            TopicRecord(id=row.id, name=row.name)
            for row in self.session.query(TopicRow).order_by(TopicRow.id).all()
        ]

    def get_all_topic_associations(self) -> List[TopicAssociation]:
        rows = (
            self.session.query(TopicAssociationRecord)
            .order_by(TopicAssociationRecord.created_at, TopicAssociationRecord.content_id)
            .all()
        )
        return [
            TopicAssociation(topic_id=row.topic_id, content_id=row.content_id, source=row.source)
            for row in rows
        ]

    # Reporting

    def get_topic_stats(
        self,
        source: Optional[str] = None,
        weights: Optional[EngagementWeights] = None,
    ) -> List[Dict[str, Any]]:
        """Per-topic content counts and mean raw engagement, largest topics first."""
        weights = weights or EngagementWeights()
        engagement = engagement_sql_expression(
            like_weight=weights.like_weight,
            comment_weight=weights.comment_weight,
            include_duration=weights.include_duration,
            include_likes_comments=weights.include_likes_comments,
        )
        # An item linked by several sources still counts once per topic
        source_filter = "WHERE source = :source" if source else ""
        query = text(f"""
            SELECT t.id AS id, t.name AS name,
                   COUNT(c.id) AS video_count,
                   COALESCE(AVG({engagement}), 0) AS avg_engagement
            FROM topics t
            LEFT JOIN (
                SELECT DISTINCT topic_id, content_id
                FROM topic_associations {source_filter}
            ) ta ON t.id = ta.topic_id
            LEFT JOIN content_items c ON c.id = ta.content_id
            GROUP BY t.id, t.name
            ORDER BY video_count DESC, t.name ASC
        """)
        params = {'source': source} if source else {}
        rows = self.session.execute(query, params).mappings().all()
        return [dict(row) for row in rows]

    def close(self):
        """Close database session."""
        self.session.close()
