"""
Unit tests for Sentiment Scorer and SentimentEntry.
"""

import math

import pytest

from conftest import make_documents
from reviewlens.errors import ConfigurationError
from reviewlens.models.review import Review
from reviewlens.models.sentiment import SentimentEntry, polarity_score
from reviewlens.stages.sentiment import SentimentScorer


@pytest.fixture
def scorer(lexicon):
    return SentimentScorer(lexicon, negative_weight=2)


def test_balanced_example(scorer):
    """great, great, bad -> P=2, N=2, score 0."""
    entries = scorer.score(make_documents([["great", "great", "bad"]], ["ann"]))

    entry = entries["ann"]
    assert entry.positive == 2
    assert entry.negative == 2
    assert entry.score == 0.0
    assert entry.has_signal


def test_negative_example(scorer):
    """great, terrible, terrible -> P=1, N=4, score -0.6."""
    entries = scorer.score(make_documents([["great", "terrible", "terrible"]], ["bob"]))

    entry = entries["bob"]
    assert (entry.positive, entry.negative) == (1, 4)
    assert entry.score == pytest.approx(-0.6)


def test_no_signal_is_none_not_zero(scorer):
    """Authors with no lexicon matches get None, distinct from balanced 0."""
    entries = scorer.score(make_documents([["sound", "bass"], []], ["cat", "dan"]))

    assert entries["cat"].score is None
    assert entries["dan"].score is None
    assert not entries["cat"].has_signal


def test_aggregates_across_author_documents(scorer):
    documents = make_documents(
        [["great"], ["bad"], ["love", "excellent"], ["awful"]],
        ["ann", "bob", "ann", "ann"]
    )

    entries = scorer.score(documents)

    assert list(entries) == ["ann", "bob"]
    assert entries["ann"].positive == 3
    assert entries["ann"].negative == 2
    assert entries["ann"].documents == 3
    assert entries["ann"].score == pytest.approx(0.2)
    assert entries["bob"].score == -1.0


def test_negative_weight_is_configurable(lexicon):
    documents = make_documents([["great", "bad"]], ["ann"])

    assert SentimentScorer(lexicon, negative_weight=1).score(documents)["ann"].score == 0.0
    assert SentimentScorer(lexicon, negative_weight=3).score(documents)["ann"].score == pytest.approx(-0.5)


def test_unmatched_tokens_ignored(scorer):
    assert scorer.score_document(["sound", "great", "battery"]) == (1, 0)


def test_all_negative_is_minus_one(scorer):
    assert scorer.score(make_documents([["bad", "awful"]], ["x"]))["x"].score == -1.0


@pytest.mark.parametrize("lexicon_value", [None, {}])
def test_missing_or_empty_lexicon_is_configuration_error(lexicon_value):
    with pytest.raises(ConfigurationError):
        SentimentScorer(lexicon_value)


def test_plain_mapping_labels_are_validated():
    with pytest.raises(ConfigurationError, match="Invalid polarity label"):
        SentimentScorer({"great": "pos", "bad": "neg"})


def test_plain_mapping_is_normalized():
    scorer = SentimentScorer({"Great": "Positive", "bad": "negative"})

    assert scorer.score_document(["great", "bad"]) == (1.0, 2.0)


def test_non_positive_weight_rejected(lexicon):
    with pytest.raises(ConfigurationError):
        SentimentScorer(lexicon, negative_weight=0)


def test_score_bounded_and_monotonic():
    """-1 <= score <= 1; strictly increasing in P and decreasing in N away from the bounds."""
    for p in range(0, 6):
        for n in range(0, 12, 2):
            score = polarity_score(p, n)
            if p + n == 0:
                assert score is None
                continue
            assert -1 <= score <= 1
            if n > 0:
                assert polarity_score(p + 1, n) > score
            if p > 0:
                assert polarity_score(p, n + 2) < score


def test_partition_then_merge_matches_single_pass(scorer):
    """Per-author sums are independent of how documents are partitioned."""
    documents = make_documents(
        [["great", "bad"], ["terrible"], ["love"], ["poor", "easy"], ["awful"]],
        ["ann", "bob", "ann", "bob", "ann"]
    )
    whole = scorer.score(documents)

    left = scorer.score(documents[:2])
    right = scorer.score(documents[2:])
    merged = SentimentScorer.merge(list(right.values()) + list(left.values()))

    for author, entry in whole.items():
        assert merged[author].positive == entry.positive
        assert merged[author].negative == entry.negative
        assert merged[author].documents == entry.documents


def test_entry_merge_rejects_other_author():
    with pytest.raises(ValueError):
        SentimentEntry("ann", 1, 0).merge(SentimentEntry("bob", 0, 2))


def test_document_scores(scorer):
    documents = make_documents([["great"], ["sound"], ["great", "bad"]])
    assert scorer.document_scores(documents) == [1.0, None, pytest.approx(-1 / 3)]


def test_summarize_by_rating(scorer):
    reviews = [
        Review(review_id="1", author="ann", text="x", rating=5),
        Review(review_id="2", author="bob", text="x", rating=5),
        Review(review_id="3", author="cat", text="x", rating=1),
        Review(review_id="4", author="dan", text="", rating=1),
    ]
    documents = make_documents([["great"], ["great", "bad"], ["awful"], []])

    summary = scorer.summarize_by_rating(reviews, documents).set_index("rating")

    assert summary.loc[5, "reviews"] == 2
    assert summary.loc[5, "scored"] == 2
    assert summary.loc[5, "mean_score"] == pytest.approx((1.0 - 1 / 3) / 2)
    assert summary.loc[1, "reviews"] == 2
    assert summary.loc[1, "scored"] == 1
    assert summary.loc[1, "mean_score"] == -1.0


def test_summarize_by_rating_length_mismatch(scorer):
    with pytest.raises(ValueError):
        scorer.summarize_by_rating([], make_documents([["great"]]))


def test_entry_to_dict_keeps_none_score():
    data = SentimentEntry("ann", 0, 0).to_dict()
    assert data["score"] is None
    assert not math.isnan(data["positive"])
