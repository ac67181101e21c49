"""
ReviewLens - vocabulary, sentiment and topic analysis for product reviews.
"""

__version__ = "1.0.0"
