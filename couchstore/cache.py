"""
Metadata cache
Per-source memoization of collection listings and descriptions
"""

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

class MetadataCache:
    """
    Cache owned by a single CouchSource

    Entries live as long as the cache does. Nothing is invalidated
    automatically; use clear() or a new source for fresh metadata.
    """

    def __init__(self):
        self.sources: Optional[List[str]] = None
        self.descriptions: Dict[str, Dict[str, Any]] = {}

    def get_sources(self, loader: Callable[[], Optional[List[str]]]) -> List[str]:
        """
        Cached collection listing, loaded on first miss

        A loader returning None is treated as a failed load: nothing is
        cached and an empty list is returned.
        """
        if self.sources is not None:
            logger.debug("Collection listing served from cache")
            return list(self.sources)

        sources = loader()
        if sources is None:
            return []

        self.sources = list(sources)
        return list(sources)

    def get_description(
        self,
        name: str,
        loader: Callable[[], Optional[Dict[str, Any]]]
    ) -> Dict[str, Any]:
        """Cached description of collection ``name``, loaded on first miss"""
        if name in self.descriptions:
            logger.debug(f"Description of {name} served from cache")
            return dict(self.descriptions[name])

        description = loader()
        if description is None:
            return {}

        self.descriptions[name] = dict(description)
        return dict(description)

    def clear(self):
        """Drop every cached entry"""
        self.sources = None
        self.descriptions.clear()
