"""
Pipeline Orchestrator.

Runs the stages in order over a fully loaded batch of reviews:
Normalization -> Frequency -> Sentiment -> Topic Selection -> (Labeling).
Each stage returns new values; nothing a later stage reads is mutated.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from reviewlens.models.document import CorpusSnapshots
from reviewlens.models.frequency import TermFrequencyTable
from reviewlens.models.review import Review, ScoredReview
from reviewlens.models.sentiment import SentimentEntry
from reviewlens.models.topic import TopicSelection
from reviewlens.resources.lexicon import PolarityLexicon
from reviewlens.resources.stopwords import StopwordSet
from reviewlens.stages.frequency import FrequencyAnalyzer
from reviewlens.stages.normalization import CorpusNormalizer
from reviewlens.stages.sentiment import SentimentScorer
from reviewlens.stages.topic_labeling import TopicLabeler
from reviewlens.stages.topic_selection import ElbowRule, FixedK, TopicModelSelector
import config.settings as settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """
    Everything one pipeline run produces, as plain structured data.
    """
    snapshots: CorpusSnapshots
    frequencies: Dict[str, TermFrequencyTable]  # snapshot name -> table
    sentiment: Dict[str, SentimentEntry]  # author -> entry
    sentiment_by_rating: pd.DataFrame
    topics: TopicSelection
    scored_reviews: Tuple[ScoredReview, ...]
    metadata: Dict = field(default_factory=dict)
    top_frequency: int = 20  # terms reported per frequency table

    def top_terms(self, snapshot: str = "lemmatized", n: Optional[int] = None):
        return self.frequencies[snapshot].top(self.top_frequency if n is None else n)


class PipelineOrchestrator:
    """
    Coordinates one batch run over a set of reviews.
    """

    def __init__(
        self,
        normalizer: CorpusNormalizer,
        scorer: SentimentScorer,
        selector: TopicModelSelector,
        analyzer: Optional[FrequencyAnalyzer] = None,
        labeler: Optional[TopicLabeler] = None,
        top_frequency: int = settings.FREQUENCY_TOP_TERMS
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            normalizer: Corpus Normalizer stage
            scorer: Sentiment Scorer stage
            selector: Topic Model Selector stage
            analyzer: Frequency Analyzer stage (a default one if omitted)
            labeler: Optional LLM topic labeler
            top_frequency: Terms reported per frequency table
        """
        self.normalizer = normalizer
        self.scorer = scorer
        self.selector = selector
        self.analyzer = analyzer or FrequencyAnalyzer()
        self.labeler = labeler
        self.top_frequency = top_frequency

    @classmethod
    def from_settings(
        cls,
        domain_stopwords: Optional[Sequence[str]] = None,
        lexicon_path: Optional[str] = None,
        negative_weight: float = settings.NEGATIVE_WEIGHT,
        k_min: int = settings.TOPIC_K_MIN,
        k_max: int = settings.TOPIC_K_MAX,
        top_terms: int = settings.TOPIC_TOP_TERMS,
        seed: int = settings.RANDOM_SEED,
        elbow_threshold: float = settings.ELBOW_RELATIVE_THRESHOLD,
        fixed_k: Optional[int] = None,
        holdout_fraction: float = settings.HOLDOUT_FRACTION,
        n_jobs: int = settings.TOPIC_N_JOBS,
        label_topics: bool = False,
        api_key: str = settings.GOOGLE_API_KEY,
        top_frequency: int = settings.FREQUENCY_TOP_TERMS
    ) -> "PipelineOrchestrator":
        """
        Build the default NLTK/scikit-learn pipeline from settings.

        Raises:
            ConfigurationError: If any stage is misconfigured
        """
        logger.info("Initializing pipeline components...")

        if domain_stopwords is None:
            domain_stopwords = settings.DOMAIN_STOPWORDS
        stopwords = StopwordSet.english(domain_stopwords)

        lexicon_path = lexicon_path if lexicon_path is not None else settings.LEXICON_PATH
        if lexicon_path:
            lexicon = PolarityLexicon.from_file(lexicon_path)
        else:
            lexicon = PolarityLexicon.from_nltk()

        decision = FixedK(fixed_k) if fixed_k is not None else ElbowRule(elbow_threshold)

        labeler = None
        if label_topics:
            if api_key:
                labeler = TopicLabeler(
                    api_key=api_key,
                    model_name=settings.LABELING_MODEL,
                    temperature=settings.LLM_TEMPERATURE,
                    max_retries=settings.LABELING_MAX_RETRIES,
                    context=settings.LABELING_CONTEXT
                )
            else:
                logger.warning("Topic labeling requested but GOOGLE_API_KEY is not set; skipping")

        return cls(
            normalizer=CorpusNormalizer(stopwords, n_jobs=settings.NORMALIZATION_N_JOBS),
            scorer=SentimentScorer(lexicon, negative_weight=negative_weight),
            selector=TopicModelSelector(
                k_min=k_min,
                k_max=k_max,
                seed=seed,
                top_n=top_terms,
                holdout_fraction=holdout_fraction,
                max_iter=settings.LDA_MAX_ITER,
                decision=decision,
                n_jobs=n_jobs
            ),
            labeler=labeler,
            top_frequency=top_frequency
        )

    def run(self, reviews: Sequence[Review]) -> PipelineResult:
        """
        Run every stage over a complete batch of reviews.

        Args:
            reviews: All reviews to analyze

        Returns:
            PipelineResult with frequency tables, sentiment entries,
            topic selection and scored reviews
        """
        start_time = datetime.now()
        logger.info(f"Starting pipeline for {len(reviews)} reviews")

        # STAGE 1: Normalization
        texts = [r.text for r in reviews]
        authors = [r.author for r in reviews]
        snapshots = self.normalizer.snapshots(texts, authors)
        documents = snapshots.lemmatized

        # STAGE 2: Frequency
        frequencies = {
            name: self.analyzer.term_frequencies(docs)
            for name, docs in snapshots.as_dict().items()
        }
        for name, table in frequencies.items():
            top = ", ".join(f"{t}({c})" for t, c in table.top(5))
            logger.info(f"Top {name} terms: {top}")

        # STAGE 3: Sentiment
        sentiment = self.scorer.score(documents)
        document_scores = self.scorer.document_scores(documents)
        sentiment_by_rating = self.scorer.summarize_by_rating(reviews, documents)

        # STAGE 4: Topic selection
        dtm = self.analyzer.document_term_matrix(documents).prune_empty()
        topics = self.selector.select(dtm)

        # STAGE 5: Optional labeling
        if self.labeler is not None:
            topics = dataclasses.replace(
                topics, summaries=self.labeler.label_all(topics.summaries)
            )

        scored_reviews = tuple(
            ScoredReview(
                review_id=review.review_id,
                author=review.author,
                rating=review.rating,
                verified=review.verified,
                score=score,
                topic_id=topics.assignments.get(document.index)
            )
            for review, document, score in zip(reviews, documents, document_scores)
        )

        processing_time = (datetime.now() - start_time).total_seconds()
        metadata = {
            "total_reviews": len(reviews),
            "empty_documents": sum(1 for d in documents if d.is_empty),
            "topic_documents": dtm.n_documents,
            "vocabulary_size": dtm.n_terms,
            "authors": len(sentiment),
            "selected_k": topics.selected_k,
            "seed": self.selector.seed,
            "negative_weight": self.scorer.negative_weight,
            "top_frequency": self.top_frequency,
            "processing_time_seconds": processing_time,
        }

        logger.info(
            f"Pipeline complete: {len(reviews)} reviews -> {len(sentiment)} authors, "
            f"{topics.selected_k} topics in {processing_time:.1f}s"
        )

        return PipelineResult(
            snapshots=snapshots,
            frequencies=frequencies,
            sentiment=sentiment,
            sentiment_by_rating=sentiment_by_rating,
            topics=topics,
            scored_reviews=scored_reviews,
            metadata=metadata,
            top_frequency=self.top_frequency
        )
