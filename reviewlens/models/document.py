"""
Document data model.

A Document is the normalized token sequence for one review. Corpus
snapshots group the three normalization states used for frequency reports.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Document:
    """
    Normalized form of one review's text.
    Token order is preserved; empty documents are valid.
    """
    index: int  # Position of the source review in the corpus
    author: str
    tokens: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.tokens, tuple):
            object.__setattr__(self, "tokens", tuple(self.tokens))

    @property
    def is_empty(self) -> bool:
        """True when no tokens survived normalization."""
        return len(self.tokens) == 0

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class CorpusSnapshots:
    """
    The three corpus states produced by normalization.

    raw: lowercased, punctuation-stripped, whitespace-tokenized
    cleaned: digits, punctuation and stopwords removed
    lemmatized: cleaned tokens reduced to dictionary base forms
    """
    raw: Tuple[Document, ...]
    cleaned: Tuple[Document, ...]
    lemmatized: Tuple[Document, ...]

    def as_dict(self) -> dict:
        return {
            "raw": self.raw,
            "cleaned": self.cleaned,
            "lemmatized": self.lemmatized,
        }
