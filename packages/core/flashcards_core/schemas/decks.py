"""Deck schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from flashcards_core.schemas.review import Outcome


class Deck(BaseModel):
    """A named collection of cards with aggregate size and score counters.

    ``size`` is a denormalized count of the cards referencing this deck. The
    storage layer keeps it in step on insert and delete; the review engine
    relies on it as the upper bound for ordinal lookups.
    """

    id: int = Field(..., description="Unique deck id")
    title: str = Field(..., description="Deck title")
    size: int = Field(0, ge=0, description="Number of cards in the deck")
    correct_count: int = Field(0, ge=0, description="Cumulative correct answers")
    wrong_count: int = Field(0, ge=0, description="Cumulative incorrect answers")
    last_reviewed_at: datetime | None = Field(
        None, description="When the deck was last answered in a review"
    )

    @property
    def total_answers(self) -> int:
        return self.correct_count + self.wrong_count

    @property
    def percent_right(self) -> float:
        """Share of answers that were correct, as a percentage."""
        if self.total_answers == 0:
            return 0.0
        return 100.0 * self.correct_count / self.total_answers

    def record_answer(self, outcome: Outcome, at: datetime) -> None:
        """Count one scored attempt and stamp the review time."""
        if outcome == Outcome.CORRECT:
            self.correct_count += 1
        else:
            self.wrong_count += 1
        self.last_reviewed_at = at

    def increment_size(self) -> None:
        self.size += 1

    def decrement_size(self) -> None:
        self.size = max(0, self.size - 1)
