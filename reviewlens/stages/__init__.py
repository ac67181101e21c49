"""
Pipeline stages for ReviewLens.

Each stage is a pure function of its inputs and returns new values:
- Review Loader (thin I/O collaborator)
- Corpus Normalizer
- Frequency Analyzer
- Sentiment Scorer
- Topic Model Selector
- Topic Labeler (optional, LLM-backed)
"""
