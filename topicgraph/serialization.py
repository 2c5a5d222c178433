"""JSON payload for the force-directed topic graph view.

Topic ids are positional: ``topics[i]["id"] == i + 1`` and relationship
``source``/``target`` use the same 1-based positions.
"""

from typing import Any, Dict, List, Optional
import re

from topicgraph.models import Topic, TopicGraph

GENERAL_CATEGORY = "General"
GENERAL_COLOR = "#6b7280"

CATEGORY_COLORS = [
    "#e74c3c", "#3498db", "#2ecc71", "#f39c12", "#9b59b6",
    "#1abc9c", "#34495e", "#e67e22", "#8e44ad", "#16a085",
    "#27ae60", "#2980b9", "#f1c40f", "#d35400", "#c0392b",
    "#7f8c8d", "#17a2b8", "#6f42c1", "#fd7e14", "#20c997",
]

ID_OFFSET = 1


def category_for_topic(topic: Topic, topics: List[Topic], threshold: float) -> str:
    """Category a topic is displayed under.

    Categories belong to themselves. Other topics take the category they
    connect to most strongly, counting only weights strictly above the
    threshold; otherwise they fall under "General".
    """
    if topic.is_category:
        return topic.name

    for connection in topic.connections:  # already strongest first
        if connection.weight > threshold and topics[connection.target].is_category:
            return connection.target_name

    return GENERAL_CATEGORY


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


def graph_to_payload(graph: TopicGraph, threshold: Optional[float] = None) -> Dict[str, Any]:
    """Convert a topic graph into the payload the graph view renders."""
    if threshold is None:
        threshold = graph.config.get('categories', {}).get('threshold', 0.5)

    categories = [category_for_topic(topic, graph.topics, threshold) for topic in graph.topics]

    color_map: Dict[str, str] = {}
    for position, category in enumerate(dict.fromkeys(categories)):
        if category == GENERAL_CATEGORY:
            color_map[category] = GENERAL_COLOR
        else:
            color_map[category] = CATEGORY_COLORS[position % len(CATEGORY_COLORS)]

    topics = []
    for topic, category in zip(graph.topics, categories):
        if topic.is_category:
            group = f"category-{_slug(topic.name)}"
            description = f"Category topic with {len(topic.incoming_category_connections)} sub-topics"
        else:
            group = f"{category.lower()}-topic"
            description = f"{topic.name} content with {topic.video_count} videos"

        topics.append({
            'id': topic.index + ID_OFFSET,
            'topic': topic.name,
            'engagementMultiplier': topic.engagement_multiplier or 1,
            'videoCount': topic.video_count,
            'category': category,
            'categoryColor': color_map[category],
            'group': group,
            'isCategory': topic.is_category,
            'incomingCategoryConnections': list(topic.incoming_category_connections),
            'description': description,
            'topVideos': [
                {
                    'title': video.title,
                    'views': video.views,
                    'comments': video.comments,
                    'likes': video.likes,
                    'id': video.id,
                    'publishedAt': video.published_at,
                }
                for video in topic.top_videos
            ],
            'outgoingConnections': [
                {'targetTopic': connection.target_name, 'strength': connection.weight}
                for connection in topic.connections
            ],
        })

    relationships = [
        {
            'source': rel.source + ID_OFFSET,
            'target': rel.target + ID_OFFSET,
            'strength': rel.max_strength,
            'forwardStrength': rel.forward_strength,
            'reverseStrength': rel.reverse_strength,
            'label': rel.label,
        }
        for rel in graph.relationships
    ]

    return {'topics': topics, 'relationships': relationships}
