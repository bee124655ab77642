"""Shared fixtures for the rewind test suite."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from rewind.aggregator.normalizer import CanonicalCaption
from rewind.core.settings import Settings
from rewind.core.time import Period, Window, compute_window
from rewind.sources.base import DataSource, Resource

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class InMemorySource(DataSource):
    """DataSource over fixed rows, with optional per-resource failures."""

    def __init__(self, rows: Optional[Dict[Resource, List[Dict[str, Any]]]] = None,
                 failures: Optional[Dict[Resource, BaseException]] = None):
        self.rows = rows or {}
        self.failures = failures or {}
        self.calls = []
        self.closed = False

    async def fetch(self, resource, limit, window=None):
        self.calls.append((resource, limit, window))
        if resource in self.failures:
            raise self.failures[resource]
        return list(self.rows.get(resource, []))[:limit]

    async def aclose(self):
        self.closed = True


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def week_window(now) -> Window:
    return compute_window(Period.WEEK, now)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment and from config/cohorts.yaml."""
    return Settings(_env_file=None, cohorts_config_path=str(tmp_path / "missing.yaml"))


@pytest.fixture
def in_memory_source():
    return InMemorySource


@pytest.fixture
def make_caption(now):
    """Factory for CanonicalCaption with sensible defaults."""

    def _make(caption_id: str, text: str = "a caption", hours_ago: Optional[float] = 1,
              likes: int = 0, **overrides) -> CanonicalCaption:
        values = dict(
            id=caption_id,
            text=text,
            created_at=None if hours_ago is None else now - timedelta(hours=hours_ago),
            image_id=None,
            profile_id=None,
            image_url=None,
            author_name="Unknown",
            author_email=None,
            like_count=likes,
            vote_count=0,
            is_public=True,
            is_featured=False,
            has_explicit_likes=True,
        )
        values.update(overrides)
        return CanonicalCaption(**values)

    return _make


def iso_hours_ago(hours: float) -> str:
    return (NOW - timedelta(hours=hours)).isoformat()


@pytest.fixture
def hours_ago():
    return iso_hours_ago
