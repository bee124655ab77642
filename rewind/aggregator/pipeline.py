"""Rewind aggregation orchestrator.

Coordinates one rewind:
1. Window: validate the period and compute [start, end]
2. Fetch: scan every resource concurrently, degrading failures to empty sets
3. Normalize: canonical captions, filtered to the window
4. Analyze: engagement, cohorts, catalog breakdown, term frequencies, highlights
5. Fallbacks: placeholders for every zero-valued field
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from rewind.aggregator.catalog import NamedCount, count_by_catalog
from rewind.aggregator.cohorts import CohortClassifier, CohortRulesParser, CohortSummary
from rewind.aggregator.engagement import collect_vote_values, compute_engagement, rank_captions
from rewind.aggregator.fallbacks import apply_fallbacks
from rewind.aggregator.frequency import FrequencyCounter, TermFrequency
from rewind.aggregator.highlights import Highlight, build_highlights
from rewind.aggregator.normalizer import (
    CanonicalCaption,
    example_texts,
    filter_by_window,
    normalize_captions,
    summarize_volume,
)
from rewind.core.logging import get_logger
from rewind.core.settings import Settings, get_settings
from rewind.core.time import Period, Window, compute_window
from rewind.sources import DataSource, Resource, create_data_source

logger = get_logger(__name__)

Rows = List[Dict[str, Any]]


@dataclass(frozen=True)
class RewindSummary:
    """The rewind digest handed to the presentation layer."""
    period: Period
    timeframe_label: str
    window_start: datetime
    window_end: datetime
    total_captions: int
    unique_images: int
    unique_profiles: int
    featured_count: int
    public_count: int
    private_count: int
    total_likes: int
    total_votes: int
    avg_laugh_score: float
    top_captions: Tuple[CanonicalCaption, ...]
    top_terms: Tuple[TermFrequency, ...]
    top_words: Tuple[TermFrequency, ...]
    cohorts: Tuple[CohortSummary, ...]
    top_humor_flavors: Tuple[NamedCount, ...]
    top_communities: Tuple[NamedCount, ...]
    highlights: Tuple[Highlight, ...]
    failed_resources: Tuple[str, ...] = ()
    fallback_fields: FrozenSet[str] = field(default_factory=frozenset)

    def is_fallback(self, field_name: str) -> bool:
        """Whether a field holds a placeholder rather than computed data."""
        return field_name in self.fallback_fields

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'period': self.period.value,
            'timeframe_label': self.timeframe_label,
            'window': {
                'start': self.window_start.isoformat(),
                'end': self.window_end.isoformat(),
            },
            'counts': {
                'total_captions': self.total_captions,
                'unique_images': self.unique_images,
                'unique_profiles': self.unique_profiles,
                'featured': self.featured_count,
                'public': self.public_count,
                'private': self.private_count,
                'total_likes': self.total_likes,
                'total_votes': self.total_votes,
            },
            'avg_laugh_score': round(self.avg_laugh_score, 2),
            'top_captions': [caption.to_dict() for caption in self.top_captions],
            'top_terms': [term.to_dict() for term in self.top_terms],
            'top_words': [word.to_dict() for word in self.top_words],
            'cohorts': [cohort.to_dict() for cohort in self.cohorts],
            'top_humor_flavors': [entry.to_dict() for entry in self.top_humor_flavors],
            'top_communities': [entry.to_dict() for entry in self.top_communities],
            'highlights': [card.to_dict() for card in self.highlights],
            'failed_resources': list(self.failed_resources),
            'fallback_fields': sorted(self.fallback_fields),
        }


def resource_limits(settings: Settings) -> Dict[Resource, int]:
    """Row limit per resource."""
    return {
        Resource.CAPTIONS: settings.captions_limit,
        Resource.CAPTION_LIKES: settings.likes_limit,
        Resource.CAPTION_VOTES: settings.votes_limit,
        Resource.HUMOR_FLAVORS: settings.humor_flavors_limit,
        Resource.COMMUNITIES: settings.communities_limit,
        Resource.CAPTION_EXAMPLES: settings.caption_examples_limit,
        Resource.PROFILES: settings.profiles_limit,
        Resource.IMAGES: settings.images_limit,
    }


class RewindPipeline:
    """Builds a RewindSummary from a data source."""

    def __init__(self, source: DataSource,
                 settings: Optional[Settings] = None,
                 classifier: Optional[CohortClassifier] = None,
                 counter: Optional[FrequencyCounter] = None):
        self.source = source
        self.settings = settings or get_settings()
        self.limits = resource_limits(self.settings)

        if classifier is None:
            rules = CohortRulesParser.load_from_yaml(self.settings.cohorts_config_path)
            classifier = CohortClassifier(rules)
        self.classifier = classifier

        self.counter = counter or FrequencyCounter(
            top_words=self.settings.top_words,
            top_terms=self.settings.top_terms,
        )

    async def fetch_all(self, window: Window) -> Tuple[Dict[Resource, Rows], List[str]]:
        """
        Scan every resource concurrently.

        A failing scan is logged and replaced by an empty list; it never
        cancels or aborts the others.

        Returns:
            (rows per resource, names of failed resources)
        """
        resources = list(self.limits)
        results = await asyncio.gather(
            *(self.source.fetch(resource, self.limits[resource], window) for resource in resources),
            return_exceptions=True,
        )

        rows: Dict[Resource, Rows] = {}
        failed: List[str] = []
        for resource, result in zip(resources, results):
            if isinstance(result, Exception):
                logger.warning(f"Fetch failed for {resource.value}, continuing with no rows: {result}")
                rows[resource] = []
                failed.append(resource.value)
            elif isinstance(result, BaseException):
                raise result
            elif not isinstance(result, list):
                logger.warning(f"Fetch for {resource.value} returned {type(result).__name__}, expected rows")
                rows[resource] = []
                failed.append(resource.value)
            else:
                rows[resource] = result

        return rows, failed

    def aggregate(self, window: Window, rows: Mapping[Resource, Rows],
                  failed_resources: Sequence[str] = ()) -> RewindSummary:
        """
        Compute the summary from fetched rows.

        Pure function of its inputs: rows may be unfiltered and unsorted.
        """
        def get(resource: Resource) -> Rows:
            return rows.get(resource) or []

        like_events = get(Resource.CAPTION_LIKES)
        vote_events = get(Resource.CAPTION_VOTES)

        captions = normalize_captions(
            get(Resource.CAPTIONS),
            like_events=like_events,
            vote_events=vote_events,
            profiles=get(Resource.PROFILES),
            images=get(Resource.IMAGES),
        )
        filtered = filter_by_window(captions, window)
        logger.info(f"Normalized {len(captions)} captions, {len(filtered)} inside {window.period.value} window")

        volume = summarize_volume(filtered)
        top_captions = rank_captions(filtered, self.settings.top_captions)
        engagement = compute_engagement(filtered, like_events, vote_events, window)

        cohorts = self.classifier.summarize(filtered)
        if not any(cohort.caption_count for cohort in cohorts):
            cohorts = []

        corpus = [caption.text for caption in filtered if caption.has_text]
        corpus.extend(example_texts(get(Resource.CAPTION_EXAMPLES)))
        frequencies = self.counter.analyze(corpus)

        flavor_counts = count_by_catalog(filtered, "humor_flavor_id", get(Resource.HUMOR_FLAVORS))
        community_counts = count_by_catalog(filtered, "community_id", get(Resource.COMMUNITIES))

        highlights = build_highlights(
            filtered,
            collect_vote_values(filtered, vote_events),
            community_counts,
        )

        computed = {
            'total_captions': volume.total_captions,
            'unique_images': volume.unique_images,
            'unique_profiles': volume.unique_profiles,
            'featured_count': volume.featured_count,
            'public_count': volume.public_count,
            'private_count': volume.private_count,
            'total_likes': engagement.total_likes,
            'total_votes': engagement.total_votes,
            'avg_laugh_score': engagement.avg_laugh_score,
            'top_captions': tuple(top_captions),
            'top_terms': tuple(frequencies.top_terms),
            'top_words': tuple(frequencies.top_words),
            'cohorts': tuple(cohorts),
            'top_humor_flavors': tuple(flavor_counts[:self.settings.top_catalog]),
            'top_communities': tuple(community_counts[:self.settings.top_catalog]),
            'highlights': tuple(highlights),
        }
        values, substituted = apply_fallbacks(computed)

        if substituted:
            logger.info(f"Using placeholders for: {', '.join(sorted(substituted))}")

        return RewindSummary(
            period=window.period,
            timeframe_label=window.label,
            window_start=window.start,
            window_end=window.end,
            failed_resources=tuple(failed_resources),
            fallback_fields=substituted,
            **values,
        )

    async def run(self, period: Any, now: Optional[datetime] = None) -> RewindSummary:
        """
        Produce the rewind for a period.

        Args:
            period: 'week', 'month' or 'year'
            now: Evaluation instant (defaults to current UTC time)

        Raises:
            InvalidPeriodError: before any fetch, for an unknown period
        """
        start_time = time.time()
        window = compute_window(period, now)

        logger.info(f"Starting rewind: period={window.period.value}, "
                    f"window={window.start_iso} .. {window.end_iso}")

        rows, failed = await self.fetch_all(window)
        logger.info("Fetched " + ", ".join(f"{r.value}={len(v)}" for r, v in rows.items()))

        summary = self.aggregate(window, rows, failed)

        runtime = time.time() - start_time
        logger.info(f"Rewind completed in {runtime:.2f}s: {len(failed)} failed resources, "
                    f"{len(summary.fallback_fields)} placeholder fields")
        return summary


async def run_rewind(period: Any, source: Optional[DataSource] = None,
                     now: Optional[datetime] = None,
                     settings: Optional[Settings] = None) -> RewindSummary:
    """
    Main rewind entry point.

    Validates the period before opening a data source. When no source is
    given one is built from settings and closed afterwards.
    """
    period = Period.parse(period)
    settings = settings or get_settings()

    if source is not None:
        return await RewindPipeline(source, settings).run(period, now)

    async with create_data_source(settings) as owned_source:
        return await RewindPipeline(owned_source, settings).run(period, now)
