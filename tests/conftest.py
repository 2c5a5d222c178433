"""Shared fixtures for TopicGraph tests."""

import pytest

from topicgraph.models import ContentItem, Topic, TopicAssociation, TopicRecord
from topicgraph.providers import InMemoryCorpusProvider


@pytest.fixture
def make_item():
    """Factory for content items with preset scores."""
    def _make(
        item_id,
        channel="ch1",
        views=0,
        likes=0,
        comments=0,
        duration=0,
        score=0.0,
        normalized=1.0,
        title=None,
    ):
        item = ContentItem(
            id=str(item_id),
            channel_id=channel,
            title=title or f"Video {item_id}",
            view_count=views,
            like_count=likes,
            comment_count=comments,
            duration_seconds=duration,
            published_at="2024-01-01T00:00:00Z",
        )
        item.engagement_score = score
        item.normalized_engagement_score = normalized
        return item
    return _make


@pytest.fixture
def make_topic(make_item):
    """Factory for topics over content ids."""
    def _make(name, index, video_ids, **kwargs):
        return Topic(
            name=name,
            index=index,
            videos=tuple(make_item(video_id) for video_id in video_ids),
            **kwargs,
        )
    return _make


@pytest.fixture
def sample_provider():
    """A small, fixed corpus across three channels and eight topics."""
    channels = ["cooking-daily", "tech-talks", "fit-life"]
    items = []
    for i in range(30):
        items.append({
            "id": f"v{i:02d}",
            "channel_id": channels[i % 3],
            "title": f"Video {i}",
            "view_count": 1000 + (i * 137) % 900,
            "like_count": (i * 31) % 50,
            "comment_count": (i * 7) % 12,
            "duration_seconds": 30 + (i * 53) % 600,
            "published_at": f"2024-02-{(i % 28) + 1:02d}T12:00:00Z",
        })

    names = ["recipes", "baking", "gadgets", "ai", "workouts", "nutrition", "vlog", "tutorial"]
    topics = [TopicRecord(id=i + 1, name=name) for i, name in enumerate(names)]

    associations = []
    for i in range(30):
        for j in range(len(names)):
            if (i * 7 + j * 3) % 5 < 2:
                associations.append(TopicAssociation(topic_id=j + 1, content_id=f"v{i:02d}"))
    # A link to content that does not exist
    associations.append(TopicAssociation(topic_id=1, content_id="missing"))

    return InMemoryCorpusProvider(content_items=items, topics=topics, associations=associations)
