"""Rewind aggregation package.

This package contains modules for:
- Tokenization and stopwords (tokenizer.py)
- Word and term frequencies (frequency.py)
- Caption normalization and window filtering (normalizer.py)
- Engagement ranking and laugh score (engagement.py)
- Cohort classification (cohorts.py)
- Flavor and community breakdown (catalog.py)
- Highlight cards (highlights.py)
- Placeholder values (fallbacks.py)
- Orchestration (pipeline.py)
"""

from .catalog import NamedCount, count_by_catalog
from .cohorts import (
    CohortBucket,
    CohortClassifier,
    CohortRule,
    CohortRulesParser,
    CohortSummary,
    DEFAULT_COHORT_RULES,
)
from .engagement import EngagementStats, compute_engagement, laugh_score, rank_captions
from .fallbacks import FALLBACKS, apply_fallbacks
from .frequency import FrequencyCounter, FrequencyResult, TermFrequency
from .highlights import Highlight, build_highlights
from .normalizer import CanonicalCaption, filter_by_window, normalize_captions, summarize_volume
from .pipeline import RewindPipeline, RewindSummary, run_rewind
from .tokenizer import DEFAULT_STOPWORDS, Tokenizer

__all__ = [
    # Text
    'Tokenizer',
    'DEFAULT_STOPWORDS',
    'FrequencyCounter',
    'FrequencyResult',
    'TermFrequency',

    # Records
    'CanonicalCaption',
    'normalize_captions',
    'filter_by_window',
    'summarize_volume',

    # Engagement
    'EngagementStats',
    'compute_engagement',
    'laugh_score',
    'rank_captions',

    # Cohorts
    'CohortRule',
    'CohortBucket',
    'CohortSummary',
    'CohortClassifier',
    'CohortRulesParser',
    'DEFAULT_COHORT_RULES',

    # Breakdown and highlights
    'NamedCount',
    'count_by_catalog',
    'Highlight',
    'build_highlights',

    # Summary
    'FALLBACKS',
    'apply_fallbacks',
    'RewindPipeline',
    'RewindSummary',
    'run_rewind',
]
