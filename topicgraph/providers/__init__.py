"""Provider interfaces for the storage collaborator.

The engine consumes a full in-memory snapshot supplied by a provider.
"""

from topicgraph.providers.corpus import CorpusProvider, InMemoryCorpusProvider, JSONCorpusProvider

__all__ = [
    "CorpusProvider",
    "InMemoryCorpusProvider",
    "JSONCorpusProvider",
]
