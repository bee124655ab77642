"""Engagement ranking and laugh score.

Votes are recorded on a notional [-5, +5] scale; the digest shows them as a
[0, 5] "laugh score".
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np

from rewind.aggregator.normalizer import CanonicalCaption, record_key
from rewind.core.logging import get_logger
from rewind.core.time import Window, parse_timestamp

logger = get_logger(__name__)

DEFAULT_TOP_CAPTIONS = 6
LAUGH_SCORE_MAX = 5.0


@dataclass(frozen=True)
class EngagementStats:
    """Window-wide engagement metrics."""
    total_likes: int
    total_votes: int
    raw_vote_average: float
    avg_laugh_score: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'total_likes': self.total_likes,
            'total_votes': self.total_votes,
            'raw_vote_average': self.raw_vote_average,
            'avg_laugh_score': self.avg_laugh_score,
        }


def _vote_value(event: Mapping[str, Any]) -> Optional[float]:
    value = event.get("vote_value", event.get("value"))
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def rank_captions(captions: Sequence[CanonicalCaption],
                  top_n: int = DEFAULT_TOP_CAPTIONS) -> List[CanonicalCaption]:
    """
    Rank captions with text by like count.

    Args:
        captions: Filtered captions, most recent first
        top_n: Number of captions to keep

    Returns:
        Top captions by like count; equal counts keep their prior order
    """
    with_text = [caption for caption in captions if caption.has_text]
    ranked = sorted(with_text, key=lambda caption: caption.like_count, reverse=True)
    return ranked[:top_n]


def collect_vote_values(captions: Sequence[CanonicalCaption],
                        vote_events: Iterable[Mapping[str, Any]]) -> Dict[str, List[float]]:
    """
    Vote values per caption, for captions in the filtered set only.

    Votes for captions outside the window or missing from the fetch are
    discarded.
    """
    caption_ids = {caption.id for caption in captions}
    values: Dict[str, List[float]] = defaultdict(list)

    for event in vote_events:
        key = record_key(event.get("caption_id"))
        if key not in caption_ids:
            continue
        value = _vote_value(event)
        if value is not None:
            values[key].append(value)

    return dict(values)


def raw_vote_average(values: Sequence[float]) -> float:
    """Mean vote value; 0.0 when there are no votes."""
    if not values:
        return 0.0
    return float(np.mean(values))


def laugh_score(values: Sequence[float]) -> float:
    """
    Map vote values onto the [0, 5] laugh score.

    ``clamp((mean + 5) / 2, 0, 5)``. No votes yields 0 so that the summary
    falls back to its placeholder instead of showing a neutral 2.5.
    """
    if not values:
        return 0.0
    return float(np.clip((raw_vote_average(values) + 5.0) / 2.0, 0.0, LAUGH_SCORE_MAX))


def count_window_likes(captions: Sequence[CanonicalCaption],
                       like_events: Iterable[Mapping[str, Any]],
                       window: Window) -> int:
    """
    Likes attributed to the window.

    Explicit counters of filtered captions are summed. Like events are then
    counted when they fall in the window, except those for captions whose
    explicit counter was already used. An event without its own timestamp is
    in the window when its caption is.
    """
    caption_ids = {caption.id for caption in captions}
    explicit_ids = {caption.id for caption in captions if caption.has_explicit_likes}

    total = sum(caption.like_count for caption in captions if caption.has_explicit_likes)

    for event in like_events:
        key = record_key(event.get("caption_id"))
        if key in explicit_ids:
            continue
        timestamp = parse_timestamp(event.get("created_datetime_utc") or event.get("created_at"))
        if timestamp is not None:
            if window.contains(timestamp):
                total += 1
        elif key in caption_ids:
            total += 1

    return total


def compute_engagement(captions: Sequence[CanonicalCaption],
                       like_events: Iterable[Mapping[str, Any]],
                       vote_events: Iterable[Mapping[str, Any]],
                       window: Window) -> EngagementStats:
    """Total likes, matched votes and laugh score for the filtered captions."""
    votes_by_caption = collect_vote_values(captions, vote_events)
    all_values = [value for values in votes_by_caption.values() for value in values]

    stats = EngagementStats(
        total_likes=count_window_likes(captions, like_events, window),
        total_votes=len(all_values),
        raw_vote_average=raw_vote_average(all_values),
        avg_laugh_score=laugh_score(all_values),
    )

    logger.debug(f"Engagement: {stats.to_dict()}")
    return stats
