"""Tests for configuration and schema helpers."""

import logging
from datetime import datetime, timezone
from pathlib import Path

import pytest

from flashcards_core.config import ReviewConfig
from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.decks import Deck
from flashcards_core.schemas.review import Outcome, QuizSet
from flashcards_core.settings import Settings, settings
from flashcards_core.utils.logging import configure_logging, get_logger


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self) -> None:
        config = ReviewConfig()
        assert (config.session_size, config.answer_count) == (10, 4)

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLASHCARDS_SESSION_SIZE", "5")
        monkeypatch.setenv("FLASHCARDS_WRITE_WORKERS", "2")

        loaded = Settings()
        config = ReviewConfig.from_settings(loaded)

        assert loaded.write_workers == 2
        assert config == ReviewConfig(session_size=5, answer_count=4)

    def test_invalid_answer_count(self) -> None:
        with pytest.raises(ValueError):
            ReviewConfig(answer_count=1)

    def test_log_level_from_env_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("FLASHCARDS_LOG_LEVEL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("FLASHCARDS_LOG_LEVEL=debug\n")

        assert Settings(_env_file=env_file).log_level == "debug"

    def test_package_loggers_follow_log_level(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "log_level", "WARNING")
        try:
            configure_logging()
            logger = get_logger("flashcards_core.review.session")

            assert logger.getEffectiveLevel() == logging.WARNING
            assert get_logger("flashcards_core.x", "debug").level == logging.DEBUG
        finally:
            logging.getLogger("flashcards_core.x").setLevel(logging.NOTSET)
            monkeypatch.undo()
            configure_logging()


class TestDeck:
    """Tests for deck counters."""

    def test_percent_right(self) -> None:
        deck = Deck(id=1, title="A")
        assert deck.percent_right == 0.0

        at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        deck.record_answer(Outcome.CORRECT, at)
        deck.record_answer(Outcome.CORRECT, at)
        deck.record_answer(Outcome.INCORRECT, at)

        assert deck.percent_right == pytest.approx(66.666, rel=1e-3)
        assert deck.last_reviewed_at == at

    def test_size_never_negative(self) -> None:
        deck = Deck(id=1, title="A", size=1)
        deck.decrement_size()
        deck.decrement_size()
        assert deck.size == 0


class TestQuizSet:
    """Tests for quiz set validation."""

    def test_target_must_be_a_choice(self) -> None:
        cards = [Card(id=i, front=f"f{i}", back=f"b{i}", deck_id=1) for i in range(4)]
        other = Card(id=9, front="x", back="y", deck_id=1)

        with pytest.raises(ValueError):
            QuizSet(target=other, choices=cards)

    def test_choices_must_be_distinct(self) -> None:
        card = Card(id=1, front="f", back="b", deck_id=1)

        with pytest.raises(ValueError):
            QuizSet(target=card, choices=[card, card])
