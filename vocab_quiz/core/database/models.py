"""
Database row models for the vocabulary quiz service
"""

from datetime import date, datetime
from typing import TypedDict


class Learner(TypedDict):
    """Learner model"""
    id: int
    name: str
    experience_points: int
    current_streak: int
    longest_streak: int
    last_studied_date: date | None
    version: int
    created_at: datetime
    updated_at: datetime


class VocabSetRow(TypedDict):
    """Vocabulary set model (items are loaded separately)"""
    id: int
    owner_id: int
    title: str
    description: str
    difficulty: str
    is_public: int
    published_at: datetime | None
    clone_count: int
    original_set_id: int | None
    version: int
    created_at: datetime
    updated_at: datetime


class VocabItemRow(TypedDict):
    """Vocabulary item model"""
    id: int
    set_id: int
    item_id: str
    position: int
    script: str
    romanization: str
    meaning: str
    example: str
    srs_level: int
    interval_days: int
    next_review_date: date
    needs_review: int


class QuizHistory(TypedDict):
    """Quiz history model"""
    id: int
    learner_id: int
    set_id: int
    set_title: str
    score: int
    total: int
    created_at: datetime


class PublicSetRow(VocabSetRow):
    """Published set with its author's name"""
    creator_name: str


class LeaderboardEntry(TypedDict):
    """Public leaderboard row"""
    name: str
    experience_points: int
    created_at: datetime
