"""
Exception types for ReviewLens.

Only configuration problems are errors. Empty review text is valid input
and is tracked downstream rather than rejected.
"""


class ReviewLensError(Exception):
    """Base class for all ReviewLens errors."""


class ConfigurationError(ReviewLensError, ValueError):
    """
    Raised when a stage is configured with inputs it cannot work with.

    Examples: an empty polarity lexicon, a candidate topic range with fewer
    than two values, or fewer usable documents than the smallest topic count.
    """
