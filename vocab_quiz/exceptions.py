"""
Errors raised at the quiz service boundary

The grading core itself never raises; these cover loading, locking and
persisting around it.
"""


class QuizServiceError(Exception):
    """Base class for quiz service failures"""


class SetNotFoundError(QuizServiceError):
    """Vocabulary set does not exist or is not owned by the learner"""

    def __init__(self, set_id: int, learner_id: int | None = None):
        self.set_id = set_id
        self.learner_id = learner_id
        super().__init__(f"Vocabulary set {set_id} not found")


class LearnerNotFoundError(QuizServiceError):
    """No learner record for the submitting identity"""

    def __init__(self, learner_id: int):
        self.learner_id = learner_id
        super().__init__(f"Learner {learner_id} not found")


class SubmissionInProgressError(QuizServiceError):
    """Another submission for the same learner is being graded"""

    def __init__(self, learner_id: int):
        self.learner_id = learner_id
        super().__init__(f"A submission for learner {learner_id} is already in progress")


class ConcurrentModificationError(QuizServiceError):
    """A record changed between load and save"""

    def __init__(self, record: str, record_id: int):
        self.record = record
        self.record_id = record_id
        super().__init__(f"{record} {record_id} was modified concurrently")


class SetCloneError(QuizServiceError):
    """A public set cannot be copied into the learner's collection"""

    def __init__(self, set_id: int, learner_id: int, reason: str):
        self.set_id = set_id
        self.learner_id = learner_id
        self.reason = reason
        super().__init__(f"Set {set_id} cannot be cloned by learner {learner_id}: {reason}")
