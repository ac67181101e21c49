"""
Data models for ReviewLens.

- Review: raw review record supplied by the loader
- Document: normalized token sequence for one review
- TermFrequencyTable / DocumentTermMatrix: count structures
- SentimentEntry: per-author weighted polarity aggregate
- TopicModelCandidate / TopicSummary / TopicSelection: topic model outputs
"""
