"""Tests for admin listing, anonymous lookup and fetch by id."""

import pytest

from warranty_claims.models.claim import ClaimStatus
from warranty_claims.utils.errors import InvalidQueryError, InvalidStatusError, NotFoundError
from warranty_claims.utils.sanitization import MAX_ORDER_NUMBER, MAX_SEARCH_TERM
from warranty_claims.workflow.queries import ClaimQueryEngine, emails_match


@pytest.fixture
def engine(claim_repo):
    return ClaimQueryEngine(claim_repo)


class TestListClaims:
    def test_no_filters_returns_everything_in_insertion_order(self, make_claim, engine):
        ids = [make_claim(order_number=n).id for n in ("C", "A", "B")]
        assert [c.id for c in engine.list_claims()] == ids

    def test_status_filter(self, make_claim, claim_repo, engine):
        a = make_claim(order_number="A")
        make_claim(order_number="B")
        c = make_claim(order_number="C")
        claim_repo.update_claim_status(a.id, "Resolved")
        claim_repo.update_claim_status(c.id, "Resolved")

        resolved = engine.list_claims(status_filter="Resolved")
        assert [x.id for x in resolved] == [a.id, c.id]
        assert all(x.status is ClaimStatus.RESOLVED for x in resolved)

    def test_order_number_substring_is_case_insensitive(self, make_claim, engine):
        a = make_claim(order_number="Order42")
        b = make_claim(order_number="order-0042")
        make_claim(order_number="ORD-17")
        assert [x.id for x in engine.list_claims(order_number_substring="42")] == [a.id, b.id]
        assert [x.id for x in engine.list_claims(order_number_substring="ORDER")] == [a.id, b.id]

    def test_filters_are_conjunctive(self, make_claim, claim_repo, engine):
        a = make_claim(order_number="Order42")
        make_claim(order_number="order-0042")
        claim_repo.update_claim_status(a.id, "Rejected")
        result = engine.list_claims(status_filter="Rejected", order_number_substring="42")
        assert [x.id for x in result] == [a.id]

    def test_blank_filters_match_everything(self, make_claim, engine):
        make_claim()
        make_claim(order_number="ORD-2")
        assert len(engine.list_claims(status_filter="", order_number_substring="   ")) == 2

    def test_unknown_status_filter(self, engine):
        with pytest.raises(InvalidStatusError):
            engine.list_claims(status_filter="Closed")

    def test_over_length_search_term_is_rejected(self, make_claim, engine):
        make_claim(order_number="A" * MAX_ORDER_NUMBER)
        with pytest.raises(InvalidQueryError):
            engine.list_claims(order_number_substring="A" * MAX_SEARCH_TERM + "ZZZ")

    def test_search_term_is_used_as_given(self, make_claim, engine):
        make_claim(order_number="ORD-42")
        assert engine.list_claims(order_number_substring="D-4") != []
        assert engine.list_claims(order_number_substring=" D-4") == []


class TestLookup:
    def test_requires_both_fields_to_match(self, make_claim, engine):
        first = make_claim(order_number="A1", email="x@y.com")
        make_claim(order_number="A1", email="z@y.com")
        make_claim(order_number="A2", email="x@y.com")
        assert [c.id for c in engine.lookup("A1", "x@y.com")] == [first.id]

    def test_order_number_must_match_exactly(self, make_claim, engine):
        make_claim(order_number="A1", email="x@y.com")
        assert engine.lookup("a1", "x@y.com") == []
        assert engine.lookup("A", "x@y.com") == []

    def test_email_is_case_insensitive(self, make_claim, engine):
        claim = make_claim(order_number="A1", email="Mila@Example.com")
        assert [c.id for c in engine.lookup("A1", "mila@example.COM")] == [claim.id]

    def test_no_match_returns_empty_list(self, make_claim, engine):
        make_claim(order_number="A1", email="x@y.com")
        assert engine.lookup("A1", "wrong@y.com") == []
        assert engine.lookup("WRONG", "x@y.com") == []

    @pytest.mark.parametrize("order_number,email", [("", "x@y.com"), ("A1", ""), (None, None), ("  ", "x@y.com")])
    def test_blank_credentials_return_empty(self, make_claim, engine, order_number, email):
        make_claim(order_number="A1", email="x@y.com")
        assert engine.lookup(order_number, email) == []

    def test_multiple_matches_sorted_by_submission_date(self, make_claim, engine):
        from datetime import datetime, timezone

        later = make_claim(order_number="A1", email="x@y.com", submission_date=datetime(2026, 9, 20, tzinfo=timezone.utc))
        earlier = make_claim(order_number="A1", email="x@y.com", submission_date=datetime(2026, 9, 10, tzinfo=timezone.utc))
        assert [c.id for c in engine.lookup("A1", "x@y.com")] == [earlier.id, later.id]

    def test_order_number_is_not_trimmed(self, make_claim, engine):
        claim = make_claim(order_number="A1", email="x@y.com")
        assert engine.lookup(" A1 ", "x@y.com") == []
        assert [c.id for c in engine.lookup("A1", " x@y.com\n")] == [claim.id]

    def test_over_length_order_number_never_matches_a_prefix(self, make_claim, engine):
        make_claim(order_number="X" * MAX_ORDER_NUMBER, email="x@y.com")
        assert engine.lookup("X" * MAX_ORDER_NUMBER + "WRONG", "x@y.com") == []

    def test_longest_stored_order_number_can_be_looked_up(self, make_claim, engine):
        claim = make_claim(order_number="B" * MAX_ORDER_NUMBER, email="x@y.com")
        assert [c.id for c in engine.lookup("B" * MAX_ORDER_NUMBER, "x@y.com")] == [claim.id]


class TestGetById:
    def test_returns_claim(self, make_claim, engine):
        claim = make_claim()
        assert engine.get_by_id(claim.id) == claim

    def test_missing_raises(self, engine):
        with pytest.raises(NotFoundError):
            engine.get_by_id("CLM-NOPE")


def test_emails_match():
    assert emails_match("A@B.com", "a@b.COM")
    assert not emails_match("a@b.com", "a@c.com")
