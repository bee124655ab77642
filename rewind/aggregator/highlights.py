"""Streaks and highlights cards."""

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rewind.aggregator.catalog import NamedCount
from rewind.aggregator.engagement import laugh_score
from rewind.aggregator.normalizer import CanonicalCaption

LAUGH_STREAK_THRESHOLD = 4.5


@dataclass(frozen=True)
class Highlight:
    """One highlight card."""
    key: str
    label: str
    description: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'label': self.label,
            'description': self.description,
            'value': self.value,
        }


def peak_day(captions: Sequence[CanonicalCaption]) -> Optional[Highlight]:
    """Day (UTC) with the most captions; ties go to the first day seen."""
    per_day = Counter(c.created_at.date() for c in captions if c.created_at is not None)
    if not per_day:
        return None

    day, count = sorted(per_day.items(), key=lambda item: item[1], reverse=True)[0]
    return Highlight(
        key="peak_day",
        label="Most chaotic day",
        description="Peak caption volume",
        value=f"{day:%b} {day.day} • {count:,} captions",
    )


def longest_streak(days: Sequence[date]) -> int:
    """Length of the longest run of consecutive calendar days."""
    best = current = 0
    previous = None
    for day in sorted(set(days)):
        current = current + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, current)
        previous = day
    return best


def laughter_streak(captions: Sequence[CanonicalCaption],
                    votes_by_caption: Mapping[str, Sequence[float]],
                    threshold: float = LAUGH_STREAK_THRESHOLD) -> Optional[Highlight]:
    """Longest run of days whose laugh score reaches ``threshold``."""
    daily_votes: Dict[date, List[float]] = defaultdict(list)
    for caption in captions:
        if caption.created_at is not None and caption.id in votes_by_caption:
            daily_votes[caption.created_at.date()].extend(votes_by_caption[caption.id])

    funny_days = [day for day, values in daily_votes.items() if laugh_score(values) >= threshold]
    streak = longest_streak(funny_days)
    if streak == 0:
        return None

    return Highlight(
        key="laughter_streak",
        label="Longest laughter streak",
        description=f"Consecutive days with {threshold:g}+ laugh score",
        value=f"{streak} day" if streak == 1 else f"{streak} days",
    )


def community_takeover(community_counts: Sequence[NamedCount]) -> Optional[Highlight]:
    """Share of community captions held by the loudest community."""
    total = sum(entry.count for entry in community_counts)
    if total == 0:
        return None

    top = community_counts[0]
    share = round(top.count / total * 100)
    return Highlight(
        key="community_takeover",
        label="Community takeover",
        description="Single community share dominance",
        value=f"{share}% from {top.name}",
    )


def build_highlights(captions: Sequence[CanonicalCaption],
                     votes_by_caption: Mapping[str, Sequence[float]],
                     community_counts: Sequence[NamedCount]) -> List[Highlight]:
    """All highlight cards that can be computed from the filtered captions."""
    cards = [
        peak_day(captions),
        laughter_streak(captions, votes_by_caption),
        community_takeover(community_counts),
    ]
    return [card for card in cards if card is not None]
