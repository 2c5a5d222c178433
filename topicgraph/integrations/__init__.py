"""External integrations for TopicGraph."""

from topicgraph.integrations.storage import SQLiteStorage

__all__ = [
    "SQLiteStorage",
]
