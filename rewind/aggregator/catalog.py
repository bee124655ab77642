"""Caption counts per humor flavor and per community."""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from rewind.aggregator.normalizer import CanonicalCaption, record_key

DEFAULT_TOP_CATALOG = 3


@dataclass(frozen=True)
class NamedCount:
    """A catalog entry and how many captions it has."""
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'count': self.count}


def catalog_names(rows: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Display names keyed by id and by slug.

    A row's name is its ``name``, else its ``slug``, else its id.
    """
    names: Dict[str, str] = {}
    for row in rows:
        key = record_key(row.get("id"))
        slug = record_key(row.get("slug"))
        name = row.get("name") or slug or key
        if not name:
            continue
        for alias in (key, slug):
            if alias is not None and alias not in names:
                names[alias] = str(name)
    return names


def count_by_catalog(captions: Sequence[CanonicalCaption], attribute: str,
                     catalog_rows: Iterable[Mapping[str, Any]]) -> List[NamedCount]:
    """
    Count captions per catalog key, most captions first.

    Args:
        captions: Filtered captions
        attribute: 'humor_flavor_id' or 'community_id'
        catalog_rows: Rows of the matching catalog table

    Returns:
        Every catalog entry that has captions; unknown keys keep the raw key
    """
    names = catalog_names(catalog_rows)
    counts = Counter()
    for caption in captions:
        key = getattr(caption, attribute)
        if key is not None:
            counts[names.get(key, key)] += 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [NamedCount(name, count) for name, count in ranked]
