"""
Sentiment Scorer.

Joins document tokens against a polarity lexicon and aggregates a
negativity-biased score per author: negative matches count
`negative_weight` times (default 2), positive matches count once.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from reviewlens.errors import ConfigurationError
from reviewlens.models.document import Document
from reviewlens.models.review import Review
from reviewlens.models.sentiment import SentimentEntry, polarity_score
from reviewlens.resources.lexicon import NEGATIVE, POSITIVE, PolarityLexicon

logger = logging.getLogger(__name__)


class SentimentScorer:
    """
    Lexicon-based polarity scoring with asymmetric weights.
    """

    def __init__(self, lexicon: Mapping[str, str], negative_weight: float = 2.0):
        """
        Initialize scorer.

        Args:
            lexicon: PolarityLexicon, or a plain term -> label mapping
                     (validated by wrapping it in a PolarityLexicon)
            negative_weight: Multiplier for negative matches (positive is 1)

        Raises:
            ConfigurationError: If the lexicon is missing, empty or has
                                invalid labels, or the negative weight
                                is not positive
        """
        if lexicon is None or len(lexicon) == 0:
            raise ConfigurationError(
                "Sentiment scoring requires a non-empty polarity lexicon"
            )
        if not isinstance(lexicon, PolarityLexicon):
            lexicon = PolarityLexicon(lexicon)
        if negative_weight <= 0:
            raise ConfigurationError(
                f"Negative weight must be positive, got {negative_weight}"
            )

        self.lexicon = lexicon
        self.negative_weight = negative_weight

        logger.info(
            f"Initialized SentimentScorer with {len(lexicon)} lexicon terms, "
            f"negative_weight={negative_weight}"
        )

    def score_document(self, tokens: Sequence[str]) -> Tuple[float, float]:
        """
        Weighted (positive, negative) totals for one token sequence.
        Tokens absent from the lexicon are neutral and ignored.
        """
        positive = 0.0
        negative = 0.0
        for token in tokens:
            label = self.lexicon.get(token)
            if label == POSITIVE:
                positive += 1
            elif label == NEGATIVE:
                negative += self.negative_weight
        return positive, negative

    def score(self, documents: Sequence[Document]) -> Dict[str, SentimentEntry]:
        """
        One SentimentEntry per distinct author, in first-seen author order.

        Args:
            documents: Normalized documents carrying author identifiers

        Returns:
            Dict of author -> SentimentEntry
        """
        entries = self.merge(self._partial(document) for document in documents)

        silent = sum(1 for e in entries.values() if not e.has_signal)
        logger.info(
            f"Scored {len(entries)} authors from {len(documents)} documents "
            f"({silent} with no sentiment signal)"
        )
        return entries

    @staticmethod
    def merge(partials) -> Dict[str, SentimentEntry]:
        """
        Sum partial per-author entries.

        Addition is associative and commutative, so partials from any
        partitioning of the corpus merge to the same totals.
        """
        entries: Dict[str, SentimentEntry] = {}
        for partial in partials:
            existing = entries.get(partial.author)
            entries[partial.author] = existing.merge(partial) if existing else partial
        return entries

    def document_scores(self, documents: Sequence[Document]) -> List[Optional[float]]:
        """Per-document score, None for documents with no polarity matches."""
        return [polarity_score(*self.score_document(d.tokens)) for d in documents]

    def summarize_by_rating(
        self,
        reviews: Sequence[Review],
        documents: Sequence[Document]
    ) -> pd.DataFrame:
        """
        Document sentiment grouped by star rating.

        Documents without sentiment signal are counted but excluded from
        the mean.

        Returns:
            DataFrame with columns rating, reviews, scored, mean_score
        """
        if len(reviews) != len(documents):
            raise ValueError(
                f"Got {len(reviews)} reviews but {len(documents)} documents"
            )

        df = pd.DataFrame({
            "rating": [r.rating for r in reviews],
            "score": pd.Series(self.document_scores(documents), dtype="float64"),
        })

        summary = df.groupby("rating").agg(
            reviews=("score", "size"),
            scored=("score", "count"),
            mean_score=("score", "mean"),
        ).reset_index()

        return summary

    def _partial(self, document: Document) -> SentimentEntry:
        positive, negative = self.score_document(document.tokens)
        return SentimentEntry(
            author=document.author,
            positive=positive,
            negative=negative,
            documents=1
        )
