"""Configuration for the review engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flashcards_core.settings import Settings

# Number of cards drawn for one review session
DEFAULT_SESSION_SIZE = 10

# Number of answers offered per multiple-choice question
DEFAULT_ANSWER_COUNT = 4


@dataclass(frozen=True)
class ReviewConfig:
    """Sizes that shape a review session."""

    session_size: int = DEFAULT_SESSION_SIZE
    answer_count: int = DEFAULT_ANSWER_COUNT

    def __post_init__(self) -> None:
        if self.session_size < 0:
            raise ValueError("session_size must not be negative")
        if self.answer_count < 2:
            raise ValueError("answer_count must be at least 2")

    @classmethod
    def from_settings(cls, settings: Settings) -> ReviewConfig:
        return cls(
            session_size=settings.session_size,
            answer_count=settings.answer_count,
        )
