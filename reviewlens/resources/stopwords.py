"""
Stopword set.

Combines a standard English stopword list with caller-supplied domain
noise terms (product self-references, pronouns) that dominate counts
without carrying sentiment or topic signal.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StopwordSet:
    """
    Immutable set of terms removed during normalization.
    """
    terms: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(
            self, "terms", frozenset(t.strip().lower() for t in self.terms if t and t.strip())
        )

    @classmethod
    def english(cls, domain_terms: Iterable[str] = ()) -> "StopwordSet":
        """
        NLTK English stopwords plus optional domain terms.

        Downloads the NLTK stopwords corpus on first use.
        """
        from nltk.corpus import stopwords

        from reviewlens.resources.nltk_data import ensure_corpus

        ensure_corpus("stopwords")
        base = cls(frozenset(stopwords.words("english")))
        logger.debug(f"Loaded {len(base)} NLTK English stopwords")
        return base.with_domain_terms(domain_terms)

    def with_domain_terms(self, domain_terms: Iterable[str]) -> "StopwordSet":
        """Return a new set with domain noise terms added."""
        extra = [t for t in domain_terms if t and t.strip()]
        if extra:
            logger.info(f"Adding {len(extra)} domain stopwords")
        return StopwordSet(self.terms | frozenset(extra))

    def __contains__(self, term: object) -> bool:
        return term in self.terms

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)
