"""Engagement scoring for content items.

score = views · (duration / 60) + w_like · likes + w_comment · comments

Scores are then normalized by the mean score of the owning channel so a
small channel's standout post is comparable to a large channel's.
"""

from collections import defaultdict
from typing import Iterable, Optional
import logging

import numpy as np

from topicgraph.config import EngagementWeights
from topicgraph.models import ContentItem, as_number

logger = logging.getLogger(__name__)


def calculate_engagement_score(
    item: ContentItem,
    like_weight: float = 150.0,
    comment_weight: float = 500.0,
    include_duration: bool = True,
    include_likes_comments: bool = True,
) -> float:
    """Compute the raw engagement score for a single content item.

    Missing metrics count as zero.
    """
    views = as_number(item.view_count)
    likes = as_number(item.like_count)
    comments = as_number(item.comment_count)
    duration = as_number(item.duration_seconds)

    if include_duration:
        score = views * (duration / 60.0)
    else:
        score = views
    if include_likes_comments:
        score += like_weight * likes + comment_weight * comments
    return score


def engagement_sql_expression(
    like_weight: float = 150.0,
    comment_weight: float = 500.0,
    include_duration: bool = True,
    include_likes_comments: bool = True,
) -> str:
    """SQL expression equivalent to :func:`calculate_engagement_score`.

    Column names follow the ``content_items`` table in
    :mod:`topicgraph.integrations.storage`.
    """
    if include_duration:
        view_term = "COALESCE(view_count, 0) * (COALESCE(duration_seconds, 0) / 60.0)"
    else:
        view_term = "COALESCE(view_count, 0)"
    parts = [view_term]
    if include_likes_comments:
        parts.append(
            f"{like_weight} * COALESCE(like_count, 0) + {comment_weight} * COALESCE(comment_count, 0)"
        )
    return " + ".join(parts)


class EngagementScorer:
    """Attaches raw and channel-normalized engagement scores to content items."""

    def __init__(self, weights: Optional[EngagementWeights] = None):
        self.weights = weights or EngagementWeights()
        self.weights.validate()

    def score(self, item: ContentItem) -> float:
        return calculate_engagement_score(
            item,
            like_weight=self.weights.like_weight,
            comment_weight=self.weights.comment_weight,
            include_duration=self.weights.include_duration,
            include_likes_comments=self.weights.include_likes_comments,
        )

    def score_items(self, items: Iterable[ContentItem]) -> dict[str, float]:
        """Score every item in place and normalize by channel.

        A channel whose mean score is zero has nothing to normalize against;
        its items get a normalized score of 0.0.

        Returns:
            Mapping of channel id to that channel's mean engagement score
        """
        by_channel: dict[str, list[ContentItem]] = defaultdict(list)
        for item in items:
            item.engagement_score = self.score(item)
            by_channel[item.channel_id].append(item)

        channel_means: dict[str, float] = {}
        for channel_id, channel_items in by_channel.items():
            mean_score = float(np.mean([item.engagement_score for item in channel_items]))
            channel_means[channel_id] = mean_score

            if mean_score == 0:
                logger.warning(
                    f"Channel {channel_id!r} has zero mean engagement; "
                    f"normalized scores set to 0 for {len(channel_items)} items"
                )
                for item in channel_items:
                    item.normalized_engagement_score = 0.0
                continue

            for item in channel_items:
                item.normalized_engagement_score = item.engagement_score / mean_score

        logger.debug(f"Scored content across {len(channel_means)} channels")
        return channel_means
