"""Placeholder values for an always-presentable rewind.

Any summary field whose computed value is the zero value (0, an empty set or
an empty list) is replaced by its constant below. Fields are substituted
independently, and the names of substituted fields are reported back so a
caller can tell placeholders from real data.
"""

from typing import Any, Dict, FrozenSet, Mapping, Tuple

from rewind.aggregator.catalog import NamedCount
from rewind.aggregator.cohorts import CohortSummary
from rewind.aggregator.frequency import TermFrequency
from rewind.aggregator.highlights import Highlight
from rewind.aggregator.normalizer import CanonicalCaption

FALLBACK_TOTAL_CAPTIONS = 4821
FALLBACK_UNIQUE_IMAGES = 1320
FALLBACK_UNIQUE_PROFILES = 946
FALLBACK_FEATURED_COUNT = 128
FALLBACK_PUBLIC_COUNT = 4410
FALLBACK_PRIVATE_COUNT = 411
FALLBACK_TOTAL_LIKES = 1170
FALLBACK_TOTAL_VOTES = 977
FALLBACK_AVG_LAUGH_SCORE = 4.3


def _placeholder_caption(caption_id: str, text: str, image_url: str, author: str,
                         likes: int, votes: int, flavor: str, community: str) -> CanonicalCaption:
    return CanonicalCaption(
        id=caption_id,
        text=text,
        created_at=None,
        image_id=None,
        profile_id=None,
        image_url=image_url,
        author_name=author,
        author_email=None,
        like_count=likes,
        vote_count=votes,
        is_public=True,
        is_featured=True,
        humor_flavor_id=flavor,
        community_id=community,
        has_explicit_likes=True,
    )


FALLBACK_TOP_CAPTIONS: Tuple[CanonicalCaption, ...] = (
    _placeholder_caption(
        "1", "POV: you open Courseworks and it's just vibes and violence.",
        "/globe.svg", "moodboard@butler", 420, 369, "Chaotic Gen-Z", "Butler Nightshift",
    ),
    _placeholder_caption(
        "2", "This syllabus has more red flags than my dating history.",
        "/window.svg", "syllabus_slanderer", 389, 310, "Unhinged Groupchat", "CC '28 Groupchat",
    ),
    _placeholder_caption(
        "3", "Canvas due dates are a suggestion. Financial aid deadlines are a threat.",
        "/file.svg", "admin office enjoyer", 361, 298, "Deadpan Academic", "SEAS Discord",
    ),
)

FALLBACK_TOP_TERMS: Tuple[TermFrequency, ...] = (
    TermFrequency("butler", 57),
    TermFrequency("john jay", 41),
    TermFrequency("syllabus", 38),
    TermFrequency("courseworks", 31),
    TermFrequency("midterms", 24),
)

FALLBACK_TOP_WORDS: Tuple[TermFrequency, ...] = (
    TermFrequency("butler", 57),
    TermFrequency("syllabus", 38),
    TermFrequency("courseworks", 31),
    TermFrequency("vibes", 27),
    TermFrequency("midterms", 24),
)

FALLBACK_COHORTS: Tuple[CohortSummary, ...] = (
    CohortSummary(name="ColumbiaEmail", author_count=612, caption_count=2904),
    CohortSummary(name="BarnardEmail", author_count=208, caption_count=977),
)

FALLBACK_TOP_HUMOR_FLAVORS: Tuple[NamedCount, ...] = (
    NamedCount("Chaotic Gen-Z", 1370),
    NamedCount("Deadpan Academic", 902),
    NamedCount("Unhinged Groupchat", 611),
)

FALLBACK_TOP_COMMUNITIES: Tuple[NamedCount, ...] = (
    NamedCount("CC '28 Groupchat", 540),
    NamedCount("SEAS Discord", 421),
    NamedCount("Butler Nightshift", 288),
)

FALLBACK_HIGHLIGHTS: Tuple[Highlight, ...] = (
    Highlight("peak_day", "Most chaotic day", "Peak caption volume", "Jan 23 • 1,102 captions"),
    Highlight("laughter_streak", "Longest laughter streak", "Consecutive days with 4.5+ laugh score", "7 days"),
    Highlight("community_takeover", "Community takeover", "Single community share dominance", "61% from CC '28 Groupchat"),
)

FALLBACKS: Dict[str, Any] = {
    'total_captions': FALLBACK_TOTAL_CAPTIONS,
    'unique_images': FALLBACK_UNIQUE_IMAGES,
    'unique_profiles': FALLBACK_UNIQUE_PROFILES,
    'featured_count': FALLBACK_FEATURED_COUNT,
    'public_count': FALLBACK_PUBLIC_COUNT,
    'private_count': FALLBACK_PRIVATE_COUNT,
    'total_likes': FALLBACK_TOTAL_LIKES,
    'total_votes': FALLBACK_TOTAL_VOTES,
    'avg_laugh_score': FALLBACK_AVG_LAUGH_SCORE,
    'top_captions': FALLBACK_TOP_CAPTIONS,
    'top_terms': FALLBACK_TOP_TERMS,
    'top_words': FALLBACK_TOP_WORDS,
    'cohorts': FALLBACK_COHORTS,
    'top_humor_flavors': FALLBACK_TOP_HUMOR_FLAVORS,
    'top_communities': FALLBACK_TOP_COMMUNITIES,
    'highlights': FALLBACK_HIGHLIGHTS,
}


def is_zero_value(value: Any) -> bool:
    """True for None, numeric zero and empty collections."""
    if value is None:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def apply_fallbacks(values: Mapping[str, Any],
                    fallbacks: Mapping[str, Any] = FALLBACKS) -> Tuple[Dict[str, Any], FrozenSet[str]]:
    """
    Substitute placeholders field by field.

    Args:
        values: Computed summary fields
        fallbacks: Placeholder per field name

    Returns:
        (values with placeholders applied, names of substituted fields)
    """
    result = dict(values)
    substituted = set()
    for name, placeholder in fallbacks.items():
        if name in result and is_zero_value(result[name]):
            result[name] = placeholder
            substituted.add(name)
    return result, frozenset(substituted)
