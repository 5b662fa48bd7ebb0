"""
Tests for per-learner submission locks
"""

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from vocab_quiz.core.locks.submission_lock_manager import SubmissionLockManager


class TestSubmissionLockManager:
    """Test claiming, releasing and abandoning submissions"""

    @pytest.fixture
    def lock_manager(self):
        return SubmissionLockManager(lock_timeout_minutes=5)

    def test_acquire_and_release(self, lock_manager):
        assert lock_manager.acquire_lock(1, "submit_quiz") is True
        assert lock_manager.is_locked(1)
        assert lock_manager.active_submission(1).operation == "submit_quiz"

        assert lock_manager.release_lock(1) is True
        assert not lock_manager.is_locked(1)
        assert lock_manager.active_submission(1) is None

    def test_second_acquire_fails(self, lock_manager):
        assert lock_manager.acquire_lock(1, "submit_quiz")
        assert lock_manager.acquire_lock(1, "submit_quiz") is False

    def test_locks_are_per_learner(self, lock_manager):
        assert lock_manager.acquire_lock(1, "submit_quiz")
        assert lock_manager.acquire_lock(2, "submit_quiz")
        assert lock_manager.is_locked(1) and lock_manager.is_locked(2)

    def test_release_unknown_lock(self, lock_manager):
        assert lock_manager.release_lock(42) is False

    def test_abandoned_submission_can_be_taken_over(self, lock_manager):
        lock_manager.acquire_lock(1, "submit_quiz")
        stuck = lock_manager._active[1]
        lock_manager._active[1] = replace(
            stuck, started_at=datetime.now() - timedelta(minutes=10)
        )

        assert not lock_manager.is_locked(1)
        assert lock_manager.acquire_lock(1, "submit_quiz") is True

    def test_recent_submission_is_not_taken_over(self, lock_manager):
        lock_manager.acquire_lock(1, "submit_quiz")
        stuck = lock_manager._active[1]
        lock_manager._active[1] = replace(
            stuck, started_at=datetime.now() - timedelta(minutes=4)
        )

        assert lock_manager.acquire_lock(1, "submit_quiz") is False

    def test_hold_releases_on_exit(self, lock_manager):
        with lock_manager.hold(1, "submit_quiz") as acquired:
            assert acquired is True
            assert lock_manager.is_locked(1)
        assert not lock_manager.is_locked(1)

    def test_hold_releases_on_error(self, lock_manager):
        with pytest.raises(RuntimeError):
            with lock_manager.hold(1, "submit_quiz"):
                raise RuntimeError("boom")
        assert not lock_manager.is_locked(1)

    def test_hold_does_not_release_foreign_lock(self, lock_manager):
        lock_manager.acquire_lock(1, "other")
        with lock_manager.hold(1, "submit_quiz") as acquired:
            assert acquired is False
        assert lock_manager.active_submission(1).operation == "other"
