"""Per-learner locks so one learner's submissions are graded one at a time"""

import contextlib
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveSubmission:
    """A submission currently being graded for a learner"""

    learner_id: int
    operation: str
    started_at: datetime


class SubmissionLockManager:
    """
    Tracks in-flight submissions per learner

    A claim older than the timeout is treated as abandoned (for example a
    crashed grading run) and may be taken over by the next submission.
    """

    def __init__(self, lock_timeout_minutes: int = 5):
        self._active: dict[int, ActiveSubmission] = {}
        self._guard = threading.Lock()
        self._timeout = timedelta(minutes=lock_timeout_minutes)

    def _is_stale(self, submission: ActiveSubmission, now: datetime) -> bool:
        return now - submission.started_at > self._timeout

    def _current(self, learner_id: int, now: datetime) -> ActiveSubmission | None:
        """Live claim for the learner; drops it if stale. Caller holds the guard."""
        submission = self._active.get(learner_id)
        if submission is not None and self._is_stale(submission, now):
            del self._active[learner_id]
            logger.warning(
                f"Abandoned {submission.operation} for learner {learner_id} "
                f"(started {submission.started_at:%H:%M:%S}) released"
            )
            return None
        return submission

    def acquire_lock(self, learner_id: int, operation: str) -> bool:
        """Claim the learner for an operation; False if another one is in flight"""
        now = datetime.now()
        with self._guard:
            current = self._current(learner_id, now)
            if current is not None:
                logger.warning(
                    f"Learner {learner_id} busy with {current.operation}, rejecting {operation}"
                )
                return False
            self._active[learner_id] = ActiveSubmission(learner_id, operation, now)

        logger.debug(f"Learner {learner_id} claimed for {operation}")
        return True

    def release_lock(self, learner_id: int) -> bool:
        with self._guard:
            submission = self._active.pop(learner_id, None)

        if submission is None:
            logger.warning(f"No submission in flight for learner {learner_id}")
            return False
        return True

    def is_locked(self, learner_id: int) -> bool:
        with self._guard:
            return self._current(learner_id, datetime.now()) is not None

    def active_submission(self, learner_id: int) -> ActiveSubmission | None:
        with self._guard:
            return self._current(learner_id, datetime.now())

    @contextlib.contextmanager
    def hold(self, learner_id: int, operation: str):
        """
        Context manager yielding whether the claim succeeded

        Only a claim made by this block is released on exit.
        """
        acquired = self.acquire_lock(learner_id, operation)
        try:
            yield acquired
        finally:
            if acquired:
                self.release_lock(learner_id)
