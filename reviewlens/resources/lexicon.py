"""
Polarity lexicon.

Maps terms to a fixed polarity label ("positive" or "negative"). Terms
absent from the lexicon are neutral and contribute nothing to sentiment.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Tuple

import pandas as pd

from reviewlens.errors import ConfigurationError

logger = logging.getLogger(__name__)

POSITIVE = "positive"
NEGATIVE = "negative"
LABELS = (POSITIVE, NEGATIVE)


class PolarityLexicon(Mapping):
    """
    Read-only term -> polarity mapping.

    Raises ConfigurationError when empty or when a term carries both labels.
    """

    def __init__(self, entries: Mapping[str, str], name: str = "custom"):
        normalized = {}
        for term, label in entries.items():
            label = str(label).strip().lower()
            if label not in LABELS:
                raise ConfigurationError(
                    f"Invalid polarity label {label!r} for term {term!r}. "
                    f"Must be 'positive' or 'negative'"
                )
            term = str(term).strip().lower()
            if normalized.get(term, label) != label:
                raise ConfigurationError(
                    f"Term {term!r} is labeled both positive and negative in lexicon '{name}'"
                )
            normalized[term] = label

        if not normalized:
            raise ConfigurationError(f"Polarity lexicon '{name}' is empty")

        self._entries = MappingProxyType(normalized)
        self.name = name

        logger.info(
            f"Loaded lexicon '{name}': {len(self.positive_terms())} positive, "
            f"{len(self.negative_terms())} negative terms"
        )

    def __getitem__(self, term: str) -> str:
        return self._entries[term]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PolarityLexicon(name={self.name!r}, terms={len(self)})"

    def positive_terms(self) -> Tuple[str, ...]:
        return tuple(t for t, label in self._entries.items() if label == POSITIVE)

    def negative_terms(self) -> Tuple[str, ...]:
        return tuple(t for t, label in self._entries.items() if label == NEGATIVE)

    @classmethod
    def from_mapping(cls, entries: Mapping[str, str], name: str = "custom") -> "PolarityLexicon":
        return cls(entries, name=name)

    @classmethod
    def from_word_lists(
        cls,
        positive: Iterable[str],
        negative: Iterable[str],
        name: str = "custom",
        drop_conflicts: bool = False
    ) -> "PolarityLexicon":
        """
        Build a lexicon from separate positive and negative word lists.

        Terms listed under both polarities raise ConfigurationError, or are
        dropped with a warning when drop_conflicts is set.
        """
        pairs = [(w, POSITIVE) for w in positive] + [(w, NEGATIVE) for w in negative]
        return cls(_resolve_pairs(pairs, name, drop_conflicts), name=name)

    @classmethod
    def from_nltk(cls) -> "PolarityLexicon":
        """
        Bing Liu opinion lexicon, as distributed with NLTK.

        Downloads the corpus on first use. The few words the list files under
        both polarities are dropped.
        """
        from nltk.corpus import opinion_lexicon

        from reviewlens.resources.nltk_data import ensure_corpus

        ensure_corpus("opinion_lexicon")
        return cls.from_word_lists(
            opinion_lexicon.positive(),
            opinion_lexicon.negative(),
            name="bing",
            drop_conflicts=True
        )

    @classmethod
    def from_file(cls, path: str) -> "PolarityLexicon":
        """
        Load a lexicon from CSV (columns: word, sentiment) or JSON
        (object of term -> label, or list of {"word", "sentiment"} rows).

        Raises:
            ConfigurationError: If the file is missing, malformed or empty
        """
        file_path = Path(path)
        if not file_path.exists():
            raise ConfigurationError(f"Lexicon file not found: {path}")

        name = file_path.stem
        suffix = file_path.suffix.lower()

        if suffix == ".json":
            with open(file_path, "r", encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Lexicon file {path} is not valid JSON: {e}") from e
            if isinstance(data, dict):
                pairs = list(data.items())
            else:
                try:
                    pairs = [(row["word"], row["sentiment"]) for row in data]
                except (KeyError, TypeError) as e:
                    raise ConfigurationError(
                        f"Lexicon file {path} rows must have 'word' and 'sentiment'"
                    ) from e
        else:
            df = pd.read_csv(file_path)
            df.columns = [c.strip().lower() for c in df.columns]
            missing = {"word", "sentiment"} - set(df.columns)
            if missing:
                raise ConfigurationError(
                    f"Lexicon file {path} is missing columns: {sorted(missing)}"
                )
            df = df.dropna(subset=["word", "sentiment"])
            pairs = list(zip(df["word"], df["sentiment"]))

        return cls(_resolve_pairs(pairs, name), name=name)


def _resolve_pairs(
    pairs: Iterable[Tuple[str, str]],
    name: str,
    drop_conflicts: bool = False
) -> Dict[str, str]:
    """Collapse (term, label) pairs. Conflicting labels raise unless dropped."""
    resolved: Dict[str, str] = {}
    conflicts = set()
    for term, label in pairs:
        term = str(term).strip().lower()
        label = str(label).strip().lower()
        if not term:
            continue
        if term in resolved and resolved[term] != label:
            conflicts.add(term)
        resolved.setdefault(term, label)

    if conflicts and not drop_conflicts:
        raise ConfigurationError(
            f"Lexicon '{name}' labels {len(conflicts)} terms both positive and negative "
            f"({', '.join(sorted(conflicts)[:5])})"
        )

    for term in conflicts:
        del resolved[term]

    if conflicts:
        logger.warning(
            f"Lexicon '{name}': dropped {len(conflicts)} terms with both polarities "
            f"({', '.join(sorted(conflicts)[:5])})"
        )
    return resolved
