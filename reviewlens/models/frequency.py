"""
Frequency data models.

Term-frequency tables and document-term matrices built by the
Frequency Analyzer. Both are immutable; every analyzer run returns new ones.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Tuple

import numpy as np
import pandas as pd
from scipy import sparse


class TermFrequencyTable(Mapping):
    """
    Read-only mapping of term -> total occurrence count.

    Iteration follows first-seen (insertion) order, which is also the
    tie-break order for top-N ranking.
    """

    def __init__(self, counts: Dict[str, int]):
        self._counts = MappingProxyType(dict(counts))

    def __getitem__(self, term: str) -> int:
        return self._counts[term]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other) -> bool:
        if isinstance(other, Mapping):
            return dict(self._counts) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"TermFrequencyTable({len(self)} terms, {self.total} tokens)"

    @property
    def total(self) -> int:
        """Total token count across the corpus."""
        return sum(self._counts.values())

    def top(self, n: int) -> List[Tuple[str, int]]:
        """
        Return the n most frequent terms, descending.

        Ties keep insertion order (sorted() is stable).
        """
        ranked = sorted(self._counts.items(), key=lambda item: -item[1])
        return ranked[:n]

    def to_dataframe(self, n: int = None) -> pd.DataFrame:
        """Ranked terms as a DataFrame with columns term, count."""
        rows = self.top(n if n is not None else len(self))
        return pd.DataFrame(rows, columns=["term", "count"])


@dataclass(frozen=True, eq=False)
class DocumentTermMatrix:
    """
    Sparse document x term count matrix.

    Row i holds the counts of the document at corpus position
    doc_indices[i]; column j is vocabulary[j].
    """
    counts: sparse.csr_matrix
    vocabulary: Tuple[str, ...]
    doc_indices: Tuple[int, ...]

    def __post_init__(self):
        n_rows, n_cols = self.counts.shape
        if n_rows != len(self.doc_indices):
            raise ValueError(
                f"Matrix has {n_rows} rows but {len(self.doc_indices)} document indices"
            )
        if n_cols != len(self.vocabulary):
            raise ValueError(
                f"Matrix has {n_cols} columns but vocabulary has {len(self.vocabulary)} terms"
            )

    @property
    def n_documents(self) -> int:
        return self.counts.shape[0]

    @property
    def n_terms(self) -> int:
        return self.counts.shape[1]

    def row_totals(self) -> np.ndarray:
        return np.asarray(self.counts.sum(axis=1)).ravel()

    def prune_empty(self) -> "DocumentTermMatrix":
        """
        Return a new matrix without rows whose total count is zero.

        Empty documents cannot support a topic distribution, so they are
        excluded rather than zero-filled.
        """
        keep = np.flatnonzero(self.row_totals() > 0)
        return DocumentTermMatrix(
            counts=self.counts[keep].tocsr(),
            vocabulary=self.vocabulary,
            doc_indices=tuple(self.doc_indices[i] for i in keep),
        )
