"""Shared pytest fixtures for all test files."""

import concurrent.futures
import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from warranty_claims.db.database import init_db
from warranty_claims.db.repository import BrandRepository, ClaimRepository
from warranty_claims.models.claim import ClaimInput
from warranty_claims.workflow.dispatch import NotificationDispatchCoordinator
from warranty_claims.workflow.service import ClaimService


class ImmediateExecutor(concurrent.futures.Executor):
    """Runs submitted work inline so dispatch outcomes are visible right after submit()."""

    def __init__(self):
        self.shutdown_called = False

    def submit(self, fn, /, *args, **kwargs):
        if self.shutdown_called:
            raise RuntimeError("cannot schedule new futures after shutdown")
        future = concurrent.futures.Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait=True, *, cancel_futures=False):
        self.shutdown_called = True


class RecordingSender:
    """Email sender double that records calls and optionally fails."""

    def __init__(self, fail_with: Exception | None = None, result=None):
        self.calls: list[tuple[str, str, str]] = []
        self.fail_with = fail_with
        self.result = result

    def send(self, recipient, order_number, status):
        self.calls.append((recipient, order_number, status))
        if self.fail_with is not None:
            raise self.fail_with
        return self.result


@pytest.fixture(autouse=True)
def temp_db():
    """Use a temporary SQLite DB for tests."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_db(path)
    prev = os.environ.get("WARRANTY_DB_PATH")
    os.environ["WARRANTY_DB_PATH"] = path
    try:
        yield path
    finally:
        if prev is None:
            os.environ.pop("WARRANTY_DB_PATH", None)
        else:
            os.environ["WARRANTY_DB_PATH"] = prev
        try:
            os.unlink(path)
        except OSError:
            pass


@pytest.fixture
def claim_repo(temp_db):
    return ClaimRepository(db_path=temp_db)


@pytest.fixture
def brand_repo(temp_db):
    return BrandRepository(db_path=temp_db)


@pytest.fixture
def make_claim(claim_repo):
    """Factory inserting a claim; later calls get later submission dates."""
    base = datetime(2026, 9, 1, 9, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(order_number="ORD-1", email="customer@example.com", **overrides):
        counter["n"] += 1
        data = {
            "order_number": order_number,
            "email": email,
            "name": "Test Customer",
            "phone_number": "+1 555 0100",
            "brand": "Nordlicht",
            "problem_description": "Stopped working.",
            "submission_date": base + timedelta(hours=counter["n"]),
        }
        data.update(overrides)
        claim_id = claim_repo.create_claim(ClaimInput(**data))
        return claim_repo.find_claim_by_id(claim_id)

    return _make


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def dispatcher(sender, claim_repo):
    return NotificationDispatchCoordinator(sender, repository=claim_repo, executor=ImmediateExecutor())


@pytest.fixture
def service(claim_repo, brand_repo, dispatcher):
    return ClaimService(claims=claim_repo, brands=brand_repo, dispatcher=dispatcher)


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()


@pytest.fixture
def make_sender():
    """Factory for RecordingSender doubles."""
    return RecordingSender
