"""Tests for the flavor/community breakdown and highlight cards."""

from datetime import date, datetime, timezone

from rewind.aggregator.catalog import NamedCount, catalog_names, count_by_catalog
from rewind.aggregator.highlights import (
    build_highlights,
    community_takeover,
    laughter_streak,
    longest_streak,
    peak_day,
)


def _at(day: int, hour: int = 12) -> datetime:
    return datetime(2026, 10, day, hour, tzinfo=timezone.utc)


class TestCatalog:
    """Tests for counting captions per catalog entry."""

    def test_names_by_id_and_slug(self):
        names = catalog_names([
            {"id": 1, "slug": "chaotic", "name": "Chaotic Gen-Z"},
            {"id": 2, "slug": "deadpan"},
            {"id": 3},
        ])
        assert names == {
            "1": "Chaotic Gen-Z",
            "chaotic": "Chaotic Gen-Z",
            "2": "deadpan",
            "deadpan": "deadpan",
            "3": "3",
        }

    def test_count_by_catalog(self, make_caption):
        captions = [
            make_caption("1", humor_flavor_id="1"),
            make_caption("2", humor_flavor_id="deadpan"),
            make_caption("3", humor_flavor_id="deadpan"),
            make_caption("4", humor_flavor_id="unknown-flavor"),
            make_caption("5"),
        ]
        rows = [{"id": 1, "name": "Chaotic Gen-Z"}, {"id": 2, "slug": "deadpan", "name": "Deadpan Academic"}]
        assert count_by_catalog(captions, "humor_flavor_id", rows) == [
            NamedCount("Deadpan Academic", 2),
            NamedCount("Chaotic Gen-Z", 1),
            NamedCount("unknown-flavor", 1),
        ]

    def test_count_by_community(self, make_caption):
        captions = [make_caption(str(i), community_id="c1") for i in range(3)]
        counts = count_by_catalog(captions, "community_id", [{"id": "c1", "name": "SEAS Discord"}])
        assert counts == [NamedCount("SEAS Discord", 3)]

    def test_no_captions(self):
        assert count_by_catalog([], "community_id", [{"id": 1, "name": "Empty"}]) == []


class TestPeakDay:
    """Tests for the busiest-day card."""

    def test_peak_day(self, make_caption):
        captions = [
            make_caption("1", created_at=_at(18, 1)),
            make_caption("2", created_at=_at(18, 9)),
            make_caption("3", created_at=_at(18, 23)),
            make_caption("4", created_at=_at(17)),
        ]
        card = peak_day(captions)
        assert card.key == "peak_day"
        assert card.value == "Oct 18 • 3 captions"

    def test_thousands_separator(self, make_caption):
        captions = [make_caption(str(i), created_at=_at(5)) for i in range(1102)]
        assert peak_day(captions).value == "Oct 5 • 1,102 captions"

    def test_no_timestamps(self, make_caption):
        assert peak_day([make_caption("1", hours_ago=None)]) is None


class TestStreaks:
    """Tests for consecutive-day streaks."""

    def test_longest_streak(self):
        days = [date(2026, 10, 1), date(2026, 10, 2), date(2026, 10, 3), date(2026, 10, 5)]
        assert longest_streak(days) == 3

    def test_longest_streak_unsorted_with_duplicates(self):
        days = [date(2026, 10, 9), date(2026, 10, 8), date(2026, 10, 9)]
        assert longest_streak(days) == 2

    def test_empty(self):
        assert longest_streak([]) == 0

    def test_laughter_streak(self, make_caption):
        captions = [
            make_caption("1", created_at=_at(10)),
            make_caption("2", created_at=_at(11)),
            make_caption("3", created_at=_at(12)),
        ]
        votes = {"1": [5.0], "2": [4.0, 5.0], "3": [1.0]}
        card = laughter_streak(captions, votes)
        assert card.value == "2 days"
        assert card.description == "Consecutive days with 4.5+ laugh score"

    def test_single_day(self, make_caption):
        card = laughter_streak([make_caption("1", created_at=_at(10))], {"1": [5.0]})
        assert card.value == "1 day"

    def test_no_funny_days(self, make_caption):
        assert laughter_streak([make_caption("1", created_at=_at(10))], {"1": [0.0]}) is None


class TestCommunityTakeover:
    """Tests for the dominant-community card."""

    def test_share(self):
        card = community_takeover([NamedCount("CC '28 Groupchat", 3), NamedCount("SEAS Discord", 1)])
        assert card.value == "75% from CC '28 Groupchat"

    def test_empty(self):
        assert community_takeover([]) is None


def test_build_highlights_skips_missing_cards(make_caption):
    cards = build_highlights([make_caption("1", created_at=_at(3))], {}, [])
    assert [card.key for card in cards] == ["peak_day"]


def test_build_highlights_empty():
    assert build_highlights([], {}, []) == []
