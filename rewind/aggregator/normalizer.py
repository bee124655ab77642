"""Caption record normalization helpers.

Raw caption rows come from tables whose schema has drifted over time
(``content`` vs ``text``, ``created_datetime_utc`` vs ``created_at``) and
nested relations are only present when the source embeds them. This module
reconciles those shapes into one canonical caption.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from rewind.core.logging import get_logger
from rewind.core.time import Window, parse_timestamp

logger = get_logger(__name__)

UNKNOWN_AUTHOR = "Unknown"

# Ordered fallbacks: the first present, non-empty key wins
FIELD_FALLBACKS: Dict[str, Tuple[str, ...]] = {
    "text": ("content", "text"),
    "created_at": ("created_datetime_utc", "created_at"),
    "image": ("images", "image"),
    "profile": ("profiles", "profile"),
    "like_count": ("like_count", "likes_count"),
    "example_text": ("caption", "text", "content"),
}


def resolve_field(record: Mapping[str, Any], field: str, default: Any = None) -> Any:
    """
    Resolve a canonical field from its ordered alternate keys.

    Args:
        record: Raw row
        field: Canonical field name in FIELD_FALLBACKS
        default: Returned when no alternate holds a value

    Returns:
        First alternate value that is neither None nor ""
    """
    for key in FIELD_FALLBACKS[field]:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return default


def record_key(value: Any) -> Optional[str]:
    """Join key for ids and foreign keys; ints and strings compare equal."""
    if value is None:
        return None
    key = str(value).strip()
    return key or None


def _nested(value: Any) -> Mapping[str, Any]:
    """Embedded relations arrive as a mapping, a one-element list, or nothing."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, list) and value and isinstance(value[0], Mapping):
        return value[0]
    return {}


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> Optional[str]:
    """Non-blank strings only; numbers and other junk in text columns become None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("true", "t", "1", "yes")
    return bool(value)


def index_by_id(rows: Iterable[Mapping[str, Any]]) -> Dict[str, Mapping[str, Any]]:
    """Index lookup rows by id; the first row wins on duplicates."""
    index: Dict[str, Mapping[str, Any]] = {}
    for row in rows:
        key = record_key(row.get("id"))
        if key is not None and key not in index:
            index[key] = row
    return index


def count_events_by_caption(events: Iterable[Mapping[str, Any]]) -> Counter:
    """Number of engagement events per caption id."""
    counts = Counter()
    for event in events:
        key = record_key(event.get("caption_id"))
        if key is not None:
            counts[key] += 1
    return counts


@dataclass(frozen=True)
class CanonicalCaption:
    """Normalized caption, derived once per request."""
    id: str
    text: str
    created_at: Optional[datetime]
    image_id: Optional[str]
    profile_id: Optional[str]
    image_url: Optional[str]
    author_name: str
    author_email: Optional[str]
    like_count: int
    vote_count: int
    is_public: bool
    is_featured: bool
    humor_flavor_id: Optional[str] = None
    community_id: Optional[str] = None
    has_explicit_likes: bool = False

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        like_counts: Optional[Mapping[str, int]] = None,
        vote_counts: Optional[Mapping[str, int]] = None,
        profiles: Optional[Mapping[str, Mapping[str, Any]]] = None,
        images: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> Optional["CanonicalCaption"]:
        """
        Build a canonical caption from a raw row.

        Text and timestamp resolve through FIELD_FALLBACKS. Nested image and
        profile sub-records are used when embedded, otherwise they are looked
        up by foreign key. The like count is the explicit counter when present,
        else the number of like events for the caption.

        Returns:
            CanonicalCaption, or None when the row has no id
        """
        caption_id = record_key(record.get("id"))
        if caption_id is None:
            return None

        image_id = record_key(record.get("image_id"))
        profile_id = record_key(record.get("profile_id"))

        image = _nested(resolve_field(record, "image"))
        if not image and images and image_id:
            image = images.get(image_id, {})

        profile = _nested(resolve_field(record, "profile"))
        if not profile and profiles and profile_id:
            profile = profiles.get(profile_id, {})

        author_email = _as_text(profile.get("email"))
        author_name = _as_text(profile.get("name")) or author_email or UNKNOWN_AUTHOR

        like_count = _as_int(resolve_field(record, "like_count"))
        has_explicit_likes = like_count is not None
        if like_count is None:
            like_count = (like_counts or {}).get(caption_id, 0)

        text = resolve_field(record, "text", "")

        return cls(
            id=caption_id,
            text=text if isinstance(text, str) else str(text),
            created_at=parse_timestamp(resolve_field(record, "created_at")),
            image_id=image_id,
            profile_id=profile_id,
            image_url=image.get("url") or None,
            author_name=author_name,
            author_email=author_email,
            like_count=like_count,
            vote_count=(vote_counts or {}).get(caption_id, 0),
            is_public=_as_bool(record.get("is_public"), True),
            is_featured=_as_bool(record.get("is_featured"), False),
            humor_flavor_id=record_key(record.get("humor_flavor_id")),
            community_id=record_key(record.get("community_id")),
            has_explicit_likes=has_explicit_likes,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'id': self.id,
            'text': self.text,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'image_url': self.image_url,
            'author_name': self.author_name,
            'likes': self.like_count,
            'votes': self.vote_count,
            'is_public': self.is_public,
            'is_featured': self.is_featured,
            'humor_flavor_id': self.humor_flavor_id,
            'community_id': self.community_id,
        }


@dataclass(frozen=True)
class VolumeStats:
    """Volume and uniqueness metrics over the filtered captions."""
    total_captions: int
    unique_images: int
    unique_profiles: int
    featured_count: int
    public_count: int
    private_count: int


def normalize_captions(
    records: Iterable[Mapping[str, Any]],
    like_events: Iterable[Mapping[str, Any]] = (),
    vote_events: Iterable[Mapping[str, Any]] = (),
    profiles: Iterable[Mapping[str, Any]] = (),
    images: Iterable[Mapping[str, Any]] = (),
) -> List[CanonicalCaption]:
    """
    Normalize raw caption rows in retrieval order.

    Every row with an id is kept, with or without text. Rows without an id
    are skipped.
    """
    like_counts = count_events_by_caption(like_events)
    vote_counts = count_events_by_caption(vote_events)
    profiles_by_id = index_by_id(profiles)
    images_by_id = index_by_id(images)

    captions = []
    skipped = 0
    for record in records:
        caption = CanonicalCaption.from_record(
            record,
            like_counts=like_counts,
            vote_counts=vote_counts,
            profiles=profiles_by_id,
            images=images_by_id,
        )
        if caption is None:
            skipped += 1
            continue
        captions.append(caption)

    if skipped:
        logger.warning(f"Skipped {skipped} caption rows without an id")

    return captions


def filter_by_window(captions: Sequence[CanonicalCaption], window: Window) -> List[CanonicalCaption]:
    """
    Keep captions created inside the window, most recent first.

    Captions without a timestamp are excluded. The sort is stable so equal
    timestamps keep their retrieval order, and re-filtering is a no-op.
    """
    inside = [caption for caption in captions if window.contains(caption.created_at)]
    return sorted(inside, key=lambda caption: caption.created_at, reverse=True)


def summarize_volume(captions: Sequence[CanonicalCaption]) -> VolumeStats:
    """Counts and distinct foreign keys across the filtered captions."""
    public_count = sum(1 for caption in captions if caption.is_public)
    return VolumeStats(
        total_captions=len(captions),
        unique_images=len({c.image_id for c in captions if c.image_id is not None}),
        unique_profiles=len({c.profile_id for c in captions if c.profile_id is not None}),
        featured_count=sum(1 for caption in captions if caption.is_featured),
        public_count=public_count,
        private_count=len(captions) - public_count,
    )


def example_texts(rows: Iterable[Mapping[str, Any]]) -> List[str]:
    """Texts of the auxiliary example corpus."""
    texts = []
    for row in rows:
        text = resolve_field(row, "example_text")
        if isinstance(text, str) and text.strip():
            texts.append(text)
    return texts
