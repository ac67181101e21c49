"""
Shared fixtures.

Tests use a small in-memory stopword set and a dictionary lemmatizer so
they run without downloading NLTK corpora.
"""

import pytest

from reviewlens.models.document import Document
from reviewlens.resources.lexicon import PolarityLexicon
from reviewlens.resources.stopwords import StopwordSet
from reviewlens.stages.normalization import CorpusNormalizer

STOPWORDS = {
    "a", "an", "the", "and", "or", "but", "is", "are", "was", "were", "be",
    "it", "its", "this", "that", "i", "me", "my", "we", "you", "he", "she",
    "they", "of", "to", "in", "on", "for", "with", "at", "by", "after",
    "very", "so", "too", "not", "no", "don't", "do", "does", "did", "have",
    "has", "had", "will", "would", "can", "just", "all",
}

LEMMAS = {
    "batteries": "battery",
    "dies": "die",
    "died": "die",
    "speakers": "speaker",
    "commands": "command",
    "works": "work",
    "worked": "work",
    "charges": "charge",
    "hours": "hour",
    "weeks": "week",
    "loved": "love",
    "loves": "love",
    "crashes": "crash",
    "crashing": "crash",
}


class DictLemmatizer:
    """Lookup-table lemmatizer standing in for WordNet in tests."""

    def __init__(self, table=None):
        self.table = dict(LEMMAS if table is None else table)
        self.calls = 0

    def __call__(self, token):
        self.calls += 1
        return self.table.get(token, token)


@pytest.fixture
def stopwords():
    return StopwordSet(frozenset(STOPWORDS)).with_domain_terms(["echo", "alexa"])


@pytest.fixture
def lemmatizer():
    return DictLemmatizer()


@pytest.fixture
def normalizer(stopwords, lemmatizer):
    return CorpusNormalizer(stopwords, lemmatizer=lemmatizer)


@pytest.fixture
def lexicon():
    return PolarityLexicon.from_mapping({
        "great": "positive",
        "love": "positive",
        "excellent": "positive",
        "easy": "positive",
        "bad": "negative",
        "terrible": "negative",
        "awful": "negative",
        "poor": "negative",
        "crash": "negative",
    })


def make_documents(token_lists, authors=None):
    """Build Documents from plain token lists."""
    authors = authors or ["author"] * len(token_lists)
    return tuple(
        Document(index=i, author=author, tokens=tuple(tokens))
        for i, (tokens, author) in enumerate(zip(token_lists, authors))
    )


THEMES = {
    "battery": ["battery", "charge", "hour", "power", "cable", "die"],
    "sound": ["sound", "bass", "volume", "music", "clear", "loud"],
    "setup": ["app", "wifi", "setup", "install", "connect", "update"],
}


def themed_corpus(docs_per_theme=12):
    """
    Deterministic corpus with three well-separated themes.

    Each document uses every word of its own theme and nothing else,
    with counts varying from document to document.
    """
    token_lists = []
    for words in THEMES.values():
        for d in range(docs_per_theme):
            length = 8 + d % 5
            token_lists.append([words[(d + i) % len(words)] for i in range(length)])
    return make_documents(token_lists, [f"user_{i % 7}" for i in range(len(token_lists))])
