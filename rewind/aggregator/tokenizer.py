"""Word tokenization with stopword filtering."""

import re
from typing import Iterable, List, Optional

# Common English function words plus caption filler
DEFAULT_STOPWORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "any", "can",
    "had", "her", "was", "one", "our", "out", "has", "him", "his", "how",
    "its", "may", "new", "now", "old", "see", "two", "who", "did", "get",
    "got", "let", "say", "she", "too", "use", "way", "yes", "yet", "this",
    "that", "with", "have", "from", "they", "them", "then", "than", "there",
    "their", "what", "when", "where", "which", "while", "will", "would",
    "could", "should", "been", "being", "were", "into", "just", "like",
    "more", "most", "some", "such", "only", "also", "very", "your", "about",
    "after", "again", "because", "before", "each", "here", "over", "same",
    "these", "those", "through", "under", "until", "does", "doing", "dont",
    "im", "thats", "youre",
})

APOSTROPHE_RE = re.compile(r"['‘’`]")
NON_WORD_RE = re.compile(r"\W+")


def normalize_text(text: Optional[str]) -> str:
    """
    Lower-case text, drop apostrophes and turn other non-word characters into spaces.

    Apostrophes are removed rather than split on so that "JJ's" becomes "jjs".
    """
    if not text:
        return ""
    lowered = APOSTROPHE_RE.sub("", text.lower())
    return NON_WORD_RE.sub(" ", lowered).strip()


def raw_words(text: Optional[str]) -> List[str]:
    """Normalized words with no length or stopword filtering."""
    normalized = normalize_text(text)
    return normalized.split() if normalized else []


class Tokenizer:
    """Splits text into significant tokens."""

    def __init__(self, stopwords: Optional[Iterable[str]] = None, min_length: int = 3):
        self.stopwords = frozenset(DEFAULT_STOPWORDS if stopwords is None else stopwords)
        self.min_length = min_length

    def tokenize(self, text: Optional[str]) -> List[str]:
        """
        Tokenize text into stopword-filtered words.

        Args:
            text: Free text; None and "" yield an empty list

        Returns:
            Tokens of at least ``min_length`` characters not in the stopword set
        """
        return [
            token for token in raw_words(text)
            if len(token) >= self.min_length and token not in self.stopwords
        ]
