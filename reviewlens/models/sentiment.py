"""
Sentiment data model.

Per-author aggregate of negativity-weighted polarity counts.
"""

from dataclasses import dataclass
from typing import Optional


def polarity_score(positive: float, negative: float) -> Optional[float]:
    """
    (P - N) / (P + N), or None when there is no polarity signal.

    None is kept distinct from 0.0, which means balanced sentiment.
    """
    total = positive + negative
    if total == 0:
        return None
    return (positive - negative) / total


@dataclass(frozen=True)
class SentimentEntry:
    """
    Weighted polarity totals for one author.
    """
    author: str
    positive: float  # Weighted positive count (P)
    negative: float  # Weighted negative count (N)
    documents: int = 0  # Number of the author's documents aggregated

    def __post_init__(self):
        if self.positive < 0 or self.negative < 0:
            raise ValueError(
                f"Weighted counts must be non-negative, got P={self.positive}, N={self.negative}"
            )

    @property
    def score(self) -> Optional[float]:
        return polarity_score(self.positive, self.negative)

    @property
    def has_signal(self) -> bool:
        return (self.positive + self.negative) > 0

    def merge(self, other: "SentimentEntry") -> "SentimentEntry":
        """Combine two partial aggregates for the same author."""
        if other.author != self.author:
            raise ValueError(f"Cannot merge entries for {self.author!r} and {other.author!r}")
        return SentimentEntry(
            author=self.author,
            positive=self.positive + other.positive,
            negative=self.negative + other.negative,
            documents=self.documents + other.documents,
        )

    def to_dict(self) -> dict:
        return {
            "author": self.author,
            "positive": self.positive,
            "negative": self.negative,
            "documents": self.documents,
            "score": self.score,
        }
