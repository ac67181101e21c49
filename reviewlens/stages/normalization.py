"""
Corpus Normalizer.

Converts raw review text into canonical token sequences:
lowercase -> strip digits -> strip punctuation -> remove stopwords
-> collapse whitespace -> lemmatize.
"""

import logging
import re
import unicodedata
from typing import Callable, Optional, Sequence, Tuple

from joblib import Parallel, delayed

from reviewlens.models.document import CorpusSnapshots, Document
from reviewlens.resources.stopwords import StopwordSet

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"\d+")
_APOSTROPHES = re.compile(r"['’`]")
_NON_LETTERS = re.compile(r"[^a-z\s]+")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]+")
_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"^[a-z]+$")


def _fold_case(text: str) -> str:
    """Lowercase and fold accented letters to their ASCII base."""
    text = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def _strip_punctuation(text: str, keep_digits: bool = False) -> str:
    # "don't" -> "dont", "good,cheap" -> "good cheap"
    pattern = _NON_ALNUM if keep_digits else _NON_LETTERS
    return pattern.sub(" ", _APOSTROPHES.sub("", text))


def _wordnet_lemmatizer() -> Callable[[str], str]:
    from nltk.corpus import wordnet
    from nltk.stem import WordNetLemmatizer

    from reviewlens.resources.nltk_data import ensure_corpus

    ensure_corpus("wordnet")
    # load the lazy corpus before any worker thread touches it
    wordnet.ensure_loaded()
    return WordNetLemmatizer().lemmatize


class CorpusNormalizer:
    """
    Turns raw review texts into Documents.

    Stopwords are matched after case folding and punctuation removal so
    that "Don't" and "dont" are treated alike. Lemmas that collapse onto
    a stopword are dropped as well, which keeps normalization idempotent.
    """

    def __init__(
        self,
        stopwords: StopwordSet,
        lemmatizer: Optional[Callable[[str], str]] = None,
        n_jobs: int = 1
    ):
        """
        Initialize normalizer.

        Args:
            stopwords: Combined standard + domain stopword set
            lemmatizer: Callable mapping a token to its base form
                        (defaults to NLTK's WordNet lemmatizer)
            n_jobs: Parallel workers for per-document normalization
        """
        # Stopwords are compared against de-punctuated tokens ("don't" -> "dont")
        folded = {_strip_punctuation(_fold_case(t)).strip() for t in stopwords}
        self.stopwords = StopwordSet(stopwords.terms | frozenset(t for t in folded if " " not in t))
        self.lemmatizer = lemmatizer or _wordnet_lemmatizer()
        self.n_jobs = n_jobs

        logger.info(
            f"Initialized CorpusNormalizer with {len(stopwords)} stopwords, n_jobs={n_jobs}"
        )

    def tokenize_raw(self, text: Optional[str]) -> Tuple[str, ...]:
        """Unprocessed snapshot: case-folded, punctuation stripped, split."""
        if not text:
            return ()
        return tuple(_strip_punctuation(_fold_case(text), keep_digits=True).split())

    def clean_text(self, text: Optional[str]) -> Tuple[str, ...]:
        """Steps 1-5: case, digits, punctuation, stopwords, whitespace."""
        if not text:
            return ()

        text = _fold_case(text)
        text = _DIGITS.sub("", text)
        text = _strip_punctuation(text)
        kept = [t for t in text.split() if t not in self.stopwords]
        text = _WHITESPACE.sub(" ", " ".join(kept)).strip()

        return tuple(text.split()) if text else ()

    def base_form(self, token: str) -> str:
        """
        Apply the lemmatizer until the token stops changing.

        WordNet can shorten a lemma again ("bosses" -> "boss" -> "bos").
        """
        seen = {token}
        while True:
            lemma = self.lemmatizer(token).lower()
            if lemma == token:
                return lemma
            if lemma in seen:
                # cycle: settle on its smallest member
                return min(seen)
            seen.add(lemma)
            token = lemma

    def lemmatize_tokens(self, tokens: Sequence[str]) -> Tuple[str, ...]:
        """Step 6: reduce each token to its base form."""
        lemmas = []
        for token in tokens:
            lemma = self.base_form(token)
            if _TOKEN.match(lemma) and lemma not in self.stopwords:
                lemmas.append(lemma)
        return tuple(lemmas)

    def normalize_text(self, text: Optional[str]) -> Tuple[str, ...]:
        """Full pipeline for a single text. Empty output is valid."""
        return self.lemmatize_tokens(self.clean_text(text))

    def normalize(
        self,
        texts: Sequence[Optional[str]],
        authors: Optional[Sequence[str]] = None
    ) -> Tuple[Document, ...]:
        """
        Normalize a corpus into Documents, preserving input order.

        Args:
            texts: Raw texts, one per review (None treated as "")
            authors: Author identifiers parallel to texts

        Returns:
            Tuple of Documents; empty documents are kept and tagged
        """
        authors = self._check_authors(texts, authors)
        token_lists = self._map(self.normalize_text, texts)
        documents = self._build(token_lists, authors)

        empty = sum(1 for d in documents if d.is_empty)
        logger.info(f"Normalized {len(documents)} documents ({empty} empty)")
        return documents

    def snapshots(
        self,
        texts: Sequence[Optional[str]],
        authors: Optional[Sequence[str]] = None
    ) -> CorpusSnapshots:
        """
        Build the raw, cleaned and lemmatized corpus states in one pass.
        """
        authors = self._check_authors(texts, authors)

        raw = self._build(self._map(self.tokenize_raw, texts), authors)
        cleaned_tokens = self._map(self.clean_text, texts)
        cleaned = self._build(cleaned_tokens, authors)
        lemmatized = self._build(self._map(self.lemmatize_tokens, cleaned_tokens), authors)

        logger.info(
            f"Built corpus snapshots for {len(texts)} documents: "
            f"{sum(len(d) for d in raw)} raw, {sum(len(d) for d in cleaned)} cleaned, "
            f"{sum(len(d) for d in lemmatized)} lemmatized tokens"
        )
        return CorpusSnapshots(raw=raw, cleaned=cleaned, lemmatized=lemmatized)

    def _map(self, func, items) -> list:
        if self.n_jobs == 1:
            return [func(item) for item in items]
        return Parallel(n_jobs=self.n_jobs, prefer="threads")(
            delayed(func)(item) for item in items
        )

    @staticmethod
    def _build(token_lists, authors) -> Tuple[Document, ...]:
        return tuple(
            Document(index=i, author=author, tokens=tokens)
            for i, (tokens, author) in enumerate(zip(token_lists, authors))
        )

    @staticmethod
    def _check_authors(texts, authors) -> Sequence[str]:
        if authors is None:
            return [""] * len(texts)
        if len(authors) != len(texts):
            raise ValueError(
                f"Got {len(texts)} texts but {len(authors)} authors"
            )
        return authors
