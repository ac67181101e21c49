"""
Shared read-only resources for ReviewLens stages.

- StopwordSet: standard English stopwords plus domain noise terms
- PolarityLexicon: term -> positive/negative label
"""

from reviewlens.resources.lexicon import PolarityLexicon
from reviewlens.resources.stopwords import StopwordSet

__all__ = ["PolarityLexicon", "StopwordSet"]
