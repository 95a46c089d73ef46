"""Serializable snapshot of an in-progress review session."""

from pydantic import BaseModel, Field

from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.decks import Deck
from flashcards_core.schemas.review import (
    InsufficientCards,
    OutcomeEntry,
    QuizSet,
    SessionAborted,
    SessionState,
)


class SessionSnapshot(BaseModel):
    """Everything needed to resume a session exactly where it stopped."""

    deck: Deck | None = Field(None, description="Deck record as last read")
    state: SessionState
    pending_queue: list[Card] = Field(default_factory=list)
    outcomes: list[OutcomeEntry] = Field(
        default_factory=list, description="First-attempt outcomes in order"
    )
    current: Card | None = None
    quiz: QuizSet | None = Field(None, description="Quiz currently shown, if any")
    insufficient: InsufficientCards | None = None
    aborted: SessionAborted | None = None
