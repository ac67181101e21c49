"""
Topic Model Selector.

Fits one LDA model per candidate topic count, scores each by held-out
perplexity and picks a topic count at the elbow of the (k, score) curve.
The elbow decision is pluggable: any callable mapping the curve to a k.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed
from scipy import sparse
from sklearn.decomposition import LatentDirichletAllocation

from reviewlens.errors import ConfigurationError
from reviewlens.models.frequency import DocumentTermMatrix
from reviewlens.models.topic import TopicModelCandidate, TopicSelection, TopicSummary

logger = logging.getLogger(__name__)

Curve = Sequence[Tuple[int, float]]
CurveDecision = Callable[[Curve], int]


class ElbowRule:
    """
    Smallest k after which the score stops improving meaningfully.

    The threshold is relative_threshold times the score range observed
    across the curve. The chosen k satisfies
        score(k) - score(k+1) < threshold <= score(k-1) - score(k)
    """

    def __init__(self, relative_threshold: float = 0.1):
        if not 0 < relative_threshold <= 1:
            raise ConfigurationError(
                f"Elbow threshold must be in (0, 1], got {relative_threshold}"
            )
        self.relative_threshold = relative_threshold

    def threshold(self, curve: Curve) -> float:
        scores = [score for _, score in curve]
        return self.relative_threshold * (max(scores) - min(scores))

    def __call__(self, curve: Curve) -> int:
        if len(curve) < 2:
            raise ConfigurationError("Elbow selection needs at least two candidates")

        points = sorted(curve)
        threshold = self.threshold(points)
        if threshold == 0:
            # Flat curve: extra topics buy nothing
            return points[0][0]

        for (k, score), (_, next_score) in zip(points, points[1:]):
            if score - next_score < threshold:
                return k
        return points[-1][0]

    def __repr__(self) -> str:
        return f"ElbowRule(relative_threshold={self.relative_threshold})"


class FixedK:
    """Decision that always picks a given k (a manual choice)."""

    def __init__(self, k: int):
        self.k = k

    def __call__(self, curve: Curve) -> int:
        if self.k not in {k for k, _ in curve}:
            raise ConfigurationError(f"Fixed topic count {self.k} is not among the candidates")
        return self.k

    def __repr__(self) -> str:
        return f"FixedK({self.k})"


def _fit_candidate(
    k: int,
    train: sparse.csr_matrix,
    held_out: sparse.csr_matrix,
    seed: int,
    max_iter: int
) -> TopicModelCandidate:
    """Fit one LDA model and score it on the held-out rows."""
    start = time.perf_counter()
    model = LatentDirichletAllocation(
        n_components=k,
        learning_method="batch",
        max_iter=max_iter,
        random_state=seed
    )
    model.fit(train)
    score = float(model.perplexity(held_out))

    topic_term = model.components_ / model.components_.sum(axis=1, keepdims=True)

    logger.debug(f"Fitted k={k}: perplexity={score:.3f} in {time.perf_counter() - start:.2f}s")
    return TopicModelCandidate(k=k, score=score, topic_term=topic_term, model=model)


class TopicModelSelector:
    """
    Sweeps candidate topic counts and selects one.

    Every fit uses the same seed and the same train/held-out split, so
    scores are reproducible and comparable across the sweep.
    """

    def __init__(
        self,
        k_min: int = 2,
        k_max: int = 10,
        seed: int = 123,
        top_n: int = 8,
        holdout_fraction: float = 0.2,
        max_iter: int = 20,
        decision: Optional[CurveDecision] = None,
        n_jobs: int = 1
    ):
        """
        Initialize selector.

        Args:
            k_min: Smallest candidate topic count
            k_max: Largest candidate topic count (inclusive)
            seed: Random seed for the split and every model fit
            top_n: Terms per topic summary
            holdout_fraction: Share of documents held out for scoring
                              (0 scores on the training documents)
            max_iter: LDA iterations per fit
            decision: Callable mapping the (k, score) curve to the chosen k
                      (defaults to ElbowRule())
            n_jobs: Candidate fits to run concurrently

        Raises:
            ConfigurationError: If the candidate range has fewer than two
                                values or other parameters are out of range
        """
        if k_min < 1:
            raise ConfigurationError(f"Smallest topic count must be >= 1, got {k_min}")
        if k_max - k_min + 1 < 2:
            raise ConfigurationError(
                f"Candidate range {k_min}..{k_max} must contain at least 2 topic counts"
            )
        if not 0 <= holdout_fraction < 1:
            raise ConfigurationError(
                f"Held-out fraction must be in [0, 1), got {holdout_fraction}"
            )
        if top_n < 1:
            raise ConfigurationError(f"Terms per topic must be >= 1, got {top_n}")

        self.k_values = tuple(range(k_min, k_max + 1))
        self.seed = seed
        self.top_n = top_n
        self.holdout_fraction = holdout_fraction
        self.max_iter = max_iter
        self.decision = decision or ElbowRule()
        self.n_jobs = n_jobs

        logger.info(
            f"Initialized TopicModelSelector with k={k_min}..{k_max}, seed={seed}, "
            f"holdout={holdout_fraction}, decision={self.decision!r}"
        )

    @property
    def k_min(self) -> int:
        return self.k_values[0]

    @property
    def k_max(self) -> int:
        return self.k_values[-1]

    def split(self, dtm: DocumentTermMatrix) -> Tuple[np.ndarray, np.ndarray]:
        """
        Seeded train / held-out row split.

        Falls back to scoring on the training rows when the corpus is too
        small to hold documents out.
        """
        n = dtm.n_documents
        rows = np.arange(n)
        n_held_out = int(round(n * self.holdout_fraction))

        if n_held_out == 0 or n - n_held_out < self.k_min:
            if self.holdout_fraction > 0:
                logger.warning(
                    f"Corpus of {n} documents too small to hold out "
                    f"{self.holdout_fraction:.0%}; scoring in-sample"
                )
            return rows, rows

        permuted = np.random.RandomState(self.seed).permutation(n)
        return np.sort(permuted[n_held_out:]), np.sort(permuted[:n_held_out])

    def fit_candidates(self, dtm: DocumentTermMatrix) -> List[TopicModelCandidate]:
        """
        Fit and score one model per candidate k.

        Args:
            dtm: Document-term matrix with empty rows already pruned

        Returns:
            Candidates ordered by k
        """
        self._validate(dtm)
        train_rows, held_out_rows = self.split(dtm)
        train = dtm.counts[train_rows]
        held_out = dtm.counts[held_out_rows]

        logger.info(
            f"Fitting {len(self.k_values)} topic models on {train.shape[0]} documents "
            f"(scoring on {held_out.shape[0]})"
        )

        candidates = Parallel(n_jobs=self.n_jobs)(
            delayed(_fit_candidate)(k, train, held_out, self.seed, self.max_iter)
            for k in self.k_values
        )
        return sorted(candidates, key=lambda c: c.k)

    def select(self, dtm: DocumentTermMatrix) -> TopicSelection:
        """
        Run the sweep, pick k and summarize the winning model.

        Empty rows are pruned first; they carry no count mass.

        Raises:
            ConfigurationError: If there are fewer non-empty documents than
                                the smallest candidate k
        """
        if np.any(dtm.row_totals() == 0):
            pruned = dtm.prune_empty()
            logger.info(f"Pruned {dtm.n_documents - pruned.n_documents} empty documents")
            dtm = pruned

        candidates = self.fit_candidates(dtm)
        curve = [(c.k, c.score) for c in candidates]

        selected_k = self.decision(curve)
        by_k: Dict[int, TopicModelCandidate] = {c.k: c for c in candidates}
        if selected_k not in by_k:
            raise ConfigurationError(
                f"Decision function chose k={selected_k}, which is not a candidate"
            )

        winner = by_k[selected_k]
        summaries = self.summarize(winner, dtm.vocabulary, self.top_n)
        assignments = self.assign(winner, dtm)

        logger.info(
            f"Selected k={selected_k} from curve "
            + ", ".join(f"{k}:{s:.1f}" for k, s in curve)
        )
        return TopicSelection(
            candidates=tuple(candidates),
            selected_k=selected_k,
            summaries=summaries,
            assignments=assignments
        )

    @staticmethod
    def summarize(
        candidate: TopicModelCandidate,
        vocabulary: Sequence[str],
        top_n: int = 8
    ) -> Tuple[TopicSummary, ...]:
        """
        Top terms per topic, descending probability, ties by vocabulary order.
        """
        summaries = []
        for topic_id, row in enumerate(candidate.topic_term):
            # Stable sort on negated weights keeps earlier columns first on ties
            order = np.argsort(-row, kind="stable")[:top_n]
            summaries.append(TopicSummary(
                topic_id=topic_id,
                terms=tuple(vocabulary[i] for i in order),
                weights=tuple(float(row[i]) for i in order)
            ))
        return tuple(summaries)

    @staticmethod
    def assign(candidate: TopicModelCandidate, dtm: DocumentTermMatrix) -> Dict[int, int]:
        """Dominant topic per document, keyed by corpus index."""
        if candidate.model is None or dtm.n_documents == 0:
            return {}
        doc_topic = candidate.model.transform(dtm.counts)
        dominant = np.argmax(doc_topic, axis=1)
        return {index: int(topic) for index, topic in zip(dtm.doc_indices, dominant)}

    def _validate(self, dtm: DocumentTermMatrix) -> None:
        if np.any(dtm.row_totals() == 0):
            raise ConfigurationError(
                "Document-term matrix contains empty documents; prune it before fitting"
            )
        if dtm.n_documents < self.k_min:
            raise ConfigurationError(
                f"Only {dtm.n_documents} non-empty documents for a smallest "
                f"topic count of {self.k_min}"
            )
