"""Data source capability consumed by the rewind pipeline."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

from rewind.core.time import Window


class Resource(str, Enum):
    """Tables read for one rewind. Values are the table names."""
    CAPTIONS = "captions"
    CAPTION_LIKES = "caption_likes"
    CAPTION_VOTES = "caption_votes"
    HUMOR_FLAVORS = "humor_flavors"
    COMMUNITIES = "communities"
    CAPTION_EXAMPLES = "caption_examples"
    PROFILES = "profiles"
    IMAGES = "images"


# Resources whose rows carry a creation timestamp worth pushing down
TIMESTAMPED_RESOURCES = frozenset({
    Resource.CAPTIONS,
    Resource.CAPTION_LIKES,
    Resource.CAPTION_VOTES,
})


class DataSource(ABC):
    """
    Read-only, row-limited table scans.

    Implementations may filter by ``window`` and order rows server-side, but
    callers must not rely on it.
    """

    @abstractmethod
    async def fetch(
        self,
        resource: Resource,
        limit: int,
        window: Optional[Window] = None,
    ) -> List[Dict[str, Any]]:
        """Return up to ``limit`` rows of ``resource``."""

    async def aclose(self) -> None:
        """Release transport resources."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
