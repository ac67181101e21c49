"""
Topic data models.

Represents fitted topic model candidates (one per topic count k),
the summaries derived from the selected model, and the selection result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class TopicModelCandidate:
    """
    One fitted topic model for a candidate topic count.
    Candidates are independent and compared only by score.
    """
    k: int  # Number of topics
    score: float  # Held-out perplexity (lower is better)
    topic_term: np.ndarray  # k x vocabulary matrix, rows sum to 1
    model: Any = None  # Fitted estimator, used for document-topic assignment

    def __post_init__(self):
        if self.k < 1:
            raise ValueError(f"Invalid topic count: {self.k}")
        if self.topic_term.shape[0] != self.k:
            raise ValueError(
                f"Topic-term matrix has {self.topic_term.shape[0]} rows, expected {self.k}"
            )


@dataclass(frozen=True)
class TopicSummary:
    """
    Top terms of one topic, ordered by descending probability.
    """
    topic_id: int
    terms: Tuple[str, ...]
    weights: Tuple[float, ...]
    label: Optional[str] = None  # Human-readable label, if one was assigned

    def with_label(self, label: Optional[str]) -> "TopicSummary":
        return TopicSummary(
            topic_id=self.topic_id,
            terms=self.terms,
            weights=self.weights,
            label=label,
        )

    def to_dict(self) -> dict:
        return {
            "topic_id": self.topic_id,
            "terms": list(self.terms),
            "weights": [round(w, 6) for w in self.weights],
            "label": self.label,
        }


@dataclass(frozen=True, eq=False)
class TopicSelection:
    """
    Result of a topic-count sweep: every candidate's score, the chosen k,
    the winning model's topic summaries and each document's dominant topic.
    """
    candidates: Tuple[TopicModelCandidate, ...]
    selected_k: int
    summaries: Tuple[TopicSummary, ...]
    assignments: Dict[int, int] = field(default_factory=dict)  # corpus index -> topic_id

    @property
    def scores(self) -> List[Tuple[int, float]]:
        """The (k, score) curve across all candidates."""
        return [(c.k, c.score) for c in self.candidates]

    @property
    def selected(self) -> TopicModelCandidate:
        for candidate in self.candidates:
            if candidate.k == self.selected_k:
                return candidate
        raise KeyError(f"No candidate for k={self.selected_k}")
