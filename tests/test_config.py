"""
Tests for application settings
"""

import pytest
from pydantic import ValidationError

from vocab_quiz.config import DEFAULT_SRS_INTERVALS, Settings


class TestSettings:
    """Test settings defaults, environment overrides and validation"""

    def test_defaults(self):
        settings = Settings()

        assert settings.xp_per_correct == 10
        assert settings.srs_intervals == DEFAULT_SRS_INTERVALS
        assert settings.timezone == "UTC"
        assert settings.set_cache_ttl_seconds == 600
        assert settings.history_limit == 20

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("XP_PER_CORRECT", "25")
        monkeypatch.setenv("SRS_INTERVALS", "[0, 2, 4, 8]")
        monkeypatch.setenv("TIMEZONE", "Asia/Shanghai")

        settings = Settings()

        assert settings.xp_per_correct == 25
        assert settings.srs_intervals == [0, 2, 4, 8]
        assert settings.timezone == "Asia/Shanghai"

    def test_default_intervals_are_not_shared(self):
        first = Settings()
        first.srs_intervals.append(365)
        assert Settings().srs_intervals == DEFAULT_SRS_INTERVALS

    @pytest.mark.parametrize(
        "intervals",
        [[], [0, -1, 3], [0, 7, 3]],
    )
    def test_invalid_intervals_rejected(self, intervals):
        with pytest.raises(ValidationError):
            Settings(srs_intervals=intervals)

    def test_negative_xp_rejected(self):
        with pytest.raises(ValidationError):
            Settings(xp_per_correct=-1)
