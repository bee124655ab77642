"""Word and term frequency analysis.

Two passes over the same corpus:
- Word pass: stopword-filtered tokens, ranked into ``top_words``
- Phrase pass: capitalized multi-word names plus long raw words

The two count tables are merged into ``top_terms`` ("notable mentions").
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from rewind.aggregator.tokenizer import APOSTROPHE_RE, Tokenizer, raw_words
from rewind.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOP_N = 10
LONG_WORD_MIN_LENGTH = 5

# Two or more consecutive capitalized words, e.g. "John Jay", "Low Library Steps"
CAPITALIZED_PHRASE_RE = re.compile(r"\b[A-Z][\w'’]*(?:[ \t]+[A-Z][\w'’]*)+")

# Long words that carry no meaning as a notable mention
SECONDARY_STOPWORDS = frozenset({
    "about", "after", "again", "always", "being", "because", "before",
    "could", "every", "going", "gonna", "other", "really", "should",
    "still", "their", "there", "these", "thing", "things", "think",
    "those", "where", "which", "while", "would", "youre",
})


@dataclass(frozen=True)
class TermFrequency:
    """A term and how often it occurred."""
    term: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {'term': self.term, 'count': self.count}


@dataclass(frozen=True)
class FrequencyResult:
    """Output of both frequency passes."""
    top_words: List[TermFrequency]
    top_terms: List[TermFrequency]


def rank_counts(items: Iterable[Tuple[str, int]], top_n: int) -> List[TermFrequency]:
    """Sort by count descending, keeping first-seen order for ties, and truncate."""
    ranked = sorted(items, key=lambda item: item[1], reverse=True)
    return [TermFrequency(term, count) for term, count in ranked[:top_n]]


class FrequencyCounter:
    """Counts words and phrases across a text corpus."""

    def __init__(self, tokenizer: Optional[Tokenizer] = None,
                 secondary_stopwords: Optional[Iterable[str]] = None,
                 top_words: int = DEFAULT_TOP_N,
                 top_terms: int = DEFAULT_TOP_N):
        self.tokenizer = tokenizer or Tokenizer()
        self.secondary_stopwords = frozenset(
            SECONDARY_STOPWORDS if secondary_stopwords is None else secondary_stopwords
        )
        self.top_words_n = top_words
        self.top_terms_n = top_terms

    def count_words(self, texts: Iterable[Optional[str]]) -> Counter:
        """Word pass: count stopword-filtered tokens."""
        counts = Counter()
        for text in texts:
            counts.update(self.tokenizer.tokenize(text))
        return counts

    def count_phrases(self, texts: Iterable[Optional[str]]) -> Counter:
        """
        Phrase pass: capitalized multi-word names and long raw words.

        Names are matched case-sensitively and counted lower-cased. Long words
        are not stopword-filtered.
        """
        counts = Counter()
        for text in texts:
            if not text:
                continue
            for match in CAPITALIZED_PHRASE_RE.finditer(text):
                phrase = " ".join(APOSTROPHE_RE.sub("", match.group(0)).split()).lower()
                counts[phrase] += 1
            counts.update(word for word in raw_words(text) if len(word) >= LONG_WORD_MIN_LENGTH)
        return counts

    def merge_terms(self, word_counts: Counter, phrase_counts: Counter) -> List[TermFrequency]:
        """
        Merge both count tables into the ranked ``top_terms`` list.

        Word-pass entries come first; a term seen in both tables keeps its
        word-pass entry.
        """
        merged: Dict[str, int] = {}
        for term, count in list(word_counts.items()) + list(phrase_counts.items()):
            if term in merged or term in self.secondary_stopwords:
                continue
            merged[term] = count
        return rank_counts(merged.items(), self.top_terms_n)

    def analyze(self, texts: Iterable[Optional[str]]) -> FrequencyResult:
        """
        Run both passes over a corpus.

        Args:
            texts: Caption texts followed by the example-text corpus

        Returns:
            FrequencyResult with top_words and top_terms
        """
        corpus = [text for text in texts if text]
        word_counts = self.count_words(corpus)
        phrase_counts = self.count_phrases(corpus)

        logger.debug(
            f"Frequency analysis over {len(corpus)} texts: "
            f"{len(word_counts)} distinct words, {len(phrase_counts)} distinct phrases"
        )

        return FrequencyResult(
            top_words=rank_counts(word_counts.items(), self.top_words_n),
            top_terms=self.merge_terms(word_counts, phrase_counts),
        )
