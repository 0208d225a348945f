"""Tests for statistics aggregation."""

import math

from revex_core.models import ReviewRecord
from revex_core.stats import aggregate, top_keys


def _record(author="user1", repository="repo", pr_id=1, comment_id="1"):
    return ReviewRecord(
        pr_id=pr_id,
        pr_title="PR",
        pr_author="author",
        repository=repository,
        provider="github",
        comment_id=comment_id,
        comment_author=author,
        comment_text="text",
        comment_created=None,
    )


class TestAggregate:
    def test_empty_input_is_all_zero(self):
        stats = aggregate([])
        assert stats.total_reviews == 0
        assert stats.total_prs == 0
        assert stats.top_reviewers == []
        assert stats.top_repositories == []
        assert stats.average_pr_size == 0.0
        assert stats.review_frequency == 0.0
        assert not math.isnan(stats.average_pr_size)

    def test_total_reviews_equals_record_count(self):
        records = [_record(comment_id=str(i)) for i in range(7)]
        assert aggregate(records).total_reviews == 7

    def test_top_reviewers_ranked_with_alphabetical_tie_break(self):
        records = [
            _record(author="user3", comment_id="1"),
            _record(author="user1", comment_id="2"),
            _record(author="user2", comment_id="3"),
            _record(author="user1", comment_id="4"),
        ]
        assert aggregate(records).top_reviewers == ["user1", "user2", "user3"]

    def test_top_lists_capped_at_five(self):
        records = [_record(author=f"user{i}", repository=f"repo{i}", comment_id=str(i)) for i in range(8)]
        stats = aggregate(records)
        assert len(stats.top_reviewers) == 5
        assert len(stats.top_repositories) == 5

    def test_top_repositories_by_comment_count(self):
        records = [
            _record(repository="alpha", comment_id="1"),
            _record(repository="beta", comment_id="2"),
            _record(repository="beta", comment_id="3"),
        ]
        assert aggregate(records).top_repositories == ["beta", "alpha"]

    def test_distinct_prs_and_averages(self):
        records = [
            _record(pr_id=1, comment_id="1"),
            _record(pr_id=1, comment_id="2"),
            _record(pr_id=1, comment_id="3"),
            _record(pr_id=2, comment_id="4"),
        ]
        stats = aggregate(records)
        assert stats.total_prs == 2
        assert stats.average_pr_size == 2.0
        assert stats.review_frequency == 2.0

    def test_same_pr_number_in_different_repositories_counted_separately(self):
        records = [
            _record(repository="a", pr_id=1, comment_id="1"),
            _record(repository="b", pr_id=1, comment_id="2"),
        ]
        assert aggregate(records).total_prs == 2

    def test_custom_top_n(self):
        records = [_record(author=f"user{i}", comment_id=str(i)) for i in range(8)]
        assert aggregate(records, top_n=2).top_reviewers == ["user0", "user1"]


class TestTopKeys:
    def test_zero_n_returns_empty(self):
        assert top_keys([("a", 3)], 0) == []

    def test_orders_by_count_then_key(self):
        assert top_keys([("b", 1), ("c", 2), ("a", 1)], 3) == ["c", "a", "b"]

    def test_is_deterministic_regardless_of_input_order(self):
        items = [("x", 1), ("y", 1), ("z", 1)]
        assert top_keys(items, 3) == top_keys(list(reversed(items)), 3)
