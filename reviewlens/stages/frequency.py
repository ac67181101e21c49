"""
Frequency Analyzer.

Builds term-frequency tables and document-term matrices from Documents.
Every call is a pure function of its input, so the same analyzer can be
run against the raw, cleaned and lemmatized snapshots in turn.
"""

import logging
from collections import Counter
from typing import Dict, List, Sequence, Tuple

import pandas as pd
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from reviewlens.models.document import CorpusSnapshots, Document
from reviewlens.models.frequency import DocumentTermMatrix, TermFrequencyTable

logger = logging.getLogger(__name__)


def _identity(tokens):
    return tokens


class FrequencyAnalyzer:
    """
    Counts term occurrences across a corpus.
    """

    def term_frequencies(self, documents: Sequence[Document]) -> TermFrequencyTable:
        """
        Total count of each term across all documents.

        Args:
            documents: Normalized documents (any snapshot)

        Returns:
            TermFrequencyTable in first-seen term order
        """
        counts = Counter()
        for document in documents:
            counts.update(document.tokens)

        table = TermFrequencyTable(counts)
        logger.debug(f"Counted {table.total} tokens over {len(table)} terms")
        return table

    def top_terms(self, documents: Sequence[Document], n: int = 20) -> List[Tuple[str, int]]:
        """The n most frequent terms, ties in first-seen order."""
        return self.term_frequencies(documents).top(n)

    def vocabulary(self, documents: Sequence[Document]) -> Dict[str, int]:
        """Term -> column index, in first-seen order."""
        vocabulary: Dict[str, int] = {}
        for document in documents:
            for token in document.tokens:
                if token not in vocabulary:
                    vocabulary[token] = len(vocabulary)
        return vocabulary

    def document_term_matrix(self, documents: Sequence[Document]) -> DocumentTermMatrix:
        """
        Sparse document x term count matrix over all documents.

        Empty documents appear as all-zero rows; call prune_empty() on the
        result before topic fitting.
        """
        vocabulary = self.vocabulary(documents)
        doc_indices = tuple(d.index for d in documents)

        if not vocabulary:
            counts = sparse.csr_matrix((len(documents), 0), dtype="int64")
        else:
            # Fixed vocabulary keeps columns in first-seen order
            vectorizer = CountVectorizer(
                analyzer=_identity,
                vocabulary=vocabulary,
                dtype="int64"
            )
            counts = vectorizer.transform([d.tokens for d in documents]).tocsr()

        dtm = DocumentTermMatrix(
            counts=counts,
            vocabulary=tuple(vocabulary),
            doc_indices=doc_indices
        )
        logger.info(
            f"Built document-term matrix: {dtm.n_documents} documents x {dtm.n_terms} terms"
        )
        return dtm

    def compare_snapshots(self, snapshots: CorpusSnapshots, n: int = 20) -> pd.DataFrame:
        """
        Top-n terms for each corpus snapshot, side by side.

        Returns:
            DataFrame with columns snapshot, rank, term, count
        """
        frames = []
        for name, documents in snapshots.as_dict().items():
            df = self.term_frequencies(documents).to_dataframe(n)
            df.insert(0, "rank", range(1, len(df) + 1))
            df.insert(0, "snapshot", name)
            frames.append(df)

        return pd.concat(frames, ignore_index=True)
