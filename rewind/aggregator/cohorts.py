"""Cohort classification by author email domain.

Rules are data: an ordered list of named domain sets. The first rule that
matches a caption's author email wins, so cohorts never overlap.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import yaml

from rewind.aggregator.normalizer import CanonicalCaption
from rewind.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CohortRule:
    """A named cohort and the email domains (with subdomains) that belong to it."""
    name: str
    domains: Tuple[str, ...]

    def matches(self, email: Optional[str]) -> bool:
        if not isinstance(email, str) or "@" not in email:
            return False
        domain = email.rsplit("@", 1)[1].strip().lower()
        return any(domain == d or domain.endswith("." + d) for d in self.domains)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CohortRule":
        """Create from dictionary."""
        domains = data.get('domains') or data.get('domain_suffixes') or []
        if isinstance(domains, str):
            domains = [domains]
        return cls(
            name=data['name'],
            domains=tuple(d.strip().lower().lstrip("@.") for d in domains if d and d.strip()),
        )


DEFAULT_COHORT_RULES: Tuple[CohortRule, ...] = (
    CohortRule(name="ColumbiaEmail", domains=("columbia.edu",)),
    CohortRule(name="BarnardEmail", domains=("barnard.edu",)),
)


@dataclass
class CohortBucket:
    """Authors and captions attributed to one cohort."""
    name: str
    author_ids: Set[str] = field(default_factory=set)
    captions: List[CanonicalCaption] = field(default_factory=list)

    def add(self, caption: CanonicalCaption) -> None:
        self.captions.append(caption)
        # captions embedding a profile without its foreign key are keyed by email
        if caption.profile_id is not None:
            self.author_ids.add(caption.profile_id)
        elif caption.author_email:
            self.author_ids.add(caption.author_email.lower())


@dataclass(frozen=True)
class CohortSummary:
    """Presentation projection of a cohort bucket."""
    name: str
    author_count: int
    caption_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'author_count': self.author_count,
            'caption_count': self.caption_count,
        }


class CohortClassifier:
    """Partitions captions into cohorts by priority-ordered rules."""

    def __init__(self, rules: Optional[Sequence[CohortRule]] = None):
        self.rules = tuple(DEFAULT_COHORT_RULES if rules is None else rules)

    def classify(self, caption: CanonicalCaption) -> Optional[str]:
        """Name of the first matching cohort, or None."""
        for rule in self.rules:
            if rule.matches(caption.author_email):
                return rule.name
        return None

    def partition(self, captions: Iterable[CanonicalCaption]) -> Dict[str, CohortBucket]:
        """
        Assign each caption to at most one cohort.

        Returns:
            Buckets keyed by cohort name, in rule order, including empty ones
        """
        buckets = {rule.name: CohortBucket(name=rule.name) for rule in self.rules}
        for caption in captions:
            name = self.classify(caption)
            if name is not None:
                buckets[name].add(caption)
        return buckets

    def summarize(self, captions: Iterable[CanonicalCaption]) -> List[CohortSummary]:
        """Distinct author and caption counts per cohort."""
        return [
            CohortSummary(
                name=bucket.name,
                author_count=len(bucket.author_ids),
                caption_count=len(bucket.captions),
            )
            for bucket in self.partition(captions).values()
        ]


class CohortRulesParser:
    """Loads cohort rules from YAML or dictionaries."""

    @staticmethod
    def load_from_dict(config_dict: Dict[str, Any]) -> List[CohortRule]:
        """Load cohort rules from a dictionary with a ``cohorts`` list."""
        return [CohortRule.from_dict(item) for item in config_dict.get('cohorts', [])]

    @staticmethod
    def load_from_yaml(yaml_path: str) -> List[CohortRule]:
        """
        Load cohort rules from a YAML file.

        A missing or unreadable file yields the built-in rules.
        """
        path = Path(yaml_path)
        if not path.exists():
            logger.info(f"No cohort config at {yaml_path}, using built-in rules")
            return list(DEFAULT_COHORT_RULES)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            rules = CohortRulesParser.load_from_dict(data)
        except (OSError, yaml.YAMLError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Error loading cohort config from {yaml_path}: {e}")
            return list(DEFAULT_COHORT_RULES)

        logger.info(f"Loaded {len(rules)} cohort rules from {yaml_path}")
        return rules
