"""Tests for tokenization and word/term frequency analysis."""

from collections import Counter

import pytest

from rewind.aggregator.frequency import FrequencyCounter, TermFrequency, rank_counts
from rewind.aggregator.tokenizer import DEFAULT_STOPWORDS, Tokenizer, normalize_text, raw_words


class TestTokenizer:
    """Tests for the stopword-filtering tokenizer."""

    def test_apostrophes_are_removed_not_split(self):
        assert normalize_text("JJ's is packed") == "jjs is packed"
        assert Tokenizer().tokenize("JJ’s is packed") == ["jjs", "packed"]

    def test_punctuation_and_stopwords(self):
        assert Tokenizer().tokenize("Hello, world!!! The cat") == ["hello", "world", "cat"]

    def test_short_tokens_dropped(self):
        assert Tokenizer().tokenize("ok go no yo cat") == ["cat"]

    @pytest.mark.parametrize("text", [None, "", "   ", "!!!"])
    def test_empty_input(self, text):
        assert Tokenizer().tokenize(text) == []

    def test_custom_stopwords_replace_defaults(self):
        tokenizer = Tokenizer(stopwords={"cat"})
        assert tokenizer.tokenize("the cat and dog") == ["the", "and", "dog"]

    def test_raw_words_are_unfiltered(self):
        assert raw_words("The cat, is here") == ["the", "cat", "is", "here"]

    def test_output_never_contains_stopwords_or_short_tokens(self):
        text = "This is what they said about the midterm and it was brutal"
        tokens = Tokenizer().tokenize(text)
        assert tokens == ["said", "midterm", "brutal"]
        assert all(len(token) >= 3 and token not in DEFAULT_STOPWORDS for token in tokens)


class TestRankCounts:
    """Tests for ranking counts."""

    def test_ties_keep_first_seen_order(self):
        ranked = rank_counts([("a", 1), ("b", 2), ("c", 2)], 10)
        assert ranked == [TermFrequency("b", 2), TermFrequency("c", 2), TermFrequency("a", 1)]

    def test_truncates(self):
        ranked = rank_counts([(f"w{i}", 1) for i in range(12)], 10)
        assert len(ranked) == 10
        assert ranked[0].term == "w0"


class TestFrequencyCounter:
    """Tests for the word and phrase passes."""

    def test_word_pass_counts(self):
        result = FrequencyCounter().analyze(["cat cat dog", "dog"])
        assert result.top_words == [TermFrequency("cat", 2), TermFrequency("dog", 2)]

    def test_word_pass_truncates_to_top_n(self):
        texts = [" ".join(f"word{chr(97 + i)}" for i in range(12))]
        result = FrequencyCounter(top_words=10).analyze(texts)
        assert len(result.top_words) == 10

    def test_phrase_pass_finds_names_and_long_words(self):
        counts = FrequencyCounter().count_phrases(["John Jay line again"])
        assert counts == Counter({"john jay": 1, "again": 1})

    def test_phrase_pass_multiword_names(self):
        counts = FrequencyCounter().count_phrases(["Low Library Steps are packed"])
        assert counts["low library steps"] == 1
        assert counts["library"] == 1
        assert counts["steps"] == 1
        assert counts["packed"] == 1

    def test_phrase_apostrophes_removed_like_words(self):
        result = FrequencyCounter().analyze(["JJ's Place rocks", "JJ's Place again"])
        terms = [entry.term for entry in result.top_terms]
        assert "jjs place" in terms
        assert "jj's place" not in terms
        assert TermFrequency("jjs place", 2) in result.top_terms

    def test_phrase_whitespace_is_collapsed(self):
        counts = FrequencyCounter().count_phrases(["John   Jay", "John Jay"])
        assert counts["john jay"] == 2

    def test_merged_terms(self):
        result = FrequencyCounter().analyze(["John Jay line again", "John Jay again"])
        assert result.top_terms == [
            TermFrequency("john", 2),
            TermFrequency("jay", 2),
            TermFrequency("john jay", 2),
            TermFrequency("line", 1),
        ]

    def test_merged_terms_are_deduplicated(self):
        result = FrequencyCounter().analyze(["packed packed"])
        assert result.top_terms == [TermFrequency("packed", 2)]

    def test_secondary_stopwords_excluded_from_terms(self):
        result = FrequencyCounter().analyze(["Really really gonna think"])
        terms = {entry.term for entry in result.top_terms}
        assert "really" not in terms
        assert "gonna" not in terms

    def test_empty_corpus(self):
        result = FrequencyCounter().analyze([])
        assert result.top_words == []
        assert result.top_terms == []

    def test_none_and_empty_texts_ignored(self):
        result = FrequencyCounter().analyze([None, "", "butler butler"])
        assert result.top_words == [TermFrequency("butler", 2)]

    def test_to_dict(self):
        assert TermFrequency("butler", 3).to_dict() == {'term': 'butler', 'count': 3}
