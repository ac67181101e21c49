"""
Unit tests for data model validation.
"""

import pytest

from reviewlens.models.document import Document
from reviewlens.models.review import Review, ScoredReview


def test_review_rating_validation():
    assert Review(review_id="1", author="ann", text="ok", rating=5).rating == 5

    with pytest.raises(ValueError):
        Review(review_id="1", author="ann", text="ok", rating=6)


def test_review_missing_text_becomes_empty():
    review = Review(review_id="1", author="ann", text=None, rating=3)
    assert review.text == ""


def test_review_negative_votes_rejected():
    with pytest.raises(ValueError):
        Review(review_id="1", author="ann", text="", rating=3, votes=-1)


def test_review_is_immutable():
    review = Review(review_id="1", author="ann", text="ok", rating=3)
    with pytest.raises(AttributeError):
        review.text = "changed"


def test_document_empty_tag():
    assert Document(index=0, author="ann").is_empty
    assert not Document(index=1, author="ann", tokens=["great"]).is_empty
    assert Document(index=1, author="ann", tokens=["great"]).tokens == ("great",)


def test_scored_review_to_dict():
    row = ScoredReview("r1", "ann", 5, True, None, 2).to_dict()
    assert row == {
        "review_id": "r1",
        "author": "ann",
        "rating": 5,
        "verified": True,
        "score": None,
        "topic_id": 2,
    }
