"""
Review data model.

Represents one raw product review as supplied by the record loader.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Review:
    """
    Raw product review.
    Immutable once loaded; stages only read it.
    """
    review_id: str  # Unique identifier for the review
    author: str  # Author identifier (not unique across reviews)
    text: str  # Raw review text, "" when absent
    rating: int  # 1-5 star rating
    votes: Optional[int] = None  # Helpful-vote count, if known
    verified: bool = False  # Verified-purchase flag
    title: Optional[str] = None
    category: Optional[str] = None

    def __post_init__(self):
        # Missing text is a valid, empty review
        if self.text is None:
            object.__setattr__(self, "text", "")

        if not (1 <= self.rating <= 5):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 1-5")

        if self.votes is not None and self.votes < 0:
            raise ValueError(f"Invalid vote count: {self.votes}. Must be non-negative")


@dataclass(frozen=True)
class ScoredReview:
    """
    A review joined with its sentiment score and dominant topic.
    Output record handed to reporting/plotting code.
    """
    review_id: str
    author: str
    rating: int
    verified: bool
    score: Optional[float]  # None when the document carries no sentiment signal
    topic_id: Optional[int]  # None for documents excluded from topic fitting

    def to_dict(self) -> dict:
        """Convert to a flat dict for tabular export."""
        return {
            "review_id": self.review_id,
            "author": self.author,
            "rating": self.rating,
            "verified": self.verified,
            "score": self.score,
            "topic_id": self.topic_id,
        }
