"""Data schemas for the review engine.

This module exports the card and deck records read from storage, the tagged
results a review session hands back, and the session snapshot model.
"""

from flashcards_core.schemas.cards import Card, CardStatus
from flashcards_core.schemas.decks import Deck
from flashcards_core.schemas.review import (
    AnswerResult,
    InsufficientCards,
    Outcome,
    OutcomeEntry,
    PresentResult,
    QuizSet,
    ReviewSummary,
    SessionAborted,
    SessionDone,
    SessionState,
    SubmitResult,
)
from flashcards_core.schemas.snapshot import SessionSnapshot

__all__ = [
    # Storage records
    "Card",
    "CardStatus",
    "Deck",
    # Session results
    "AnswerResult",
    "InsufficientCards",
    "Outcome",
    "OutcomeEntry",
    "PresentResult",
    "QuizSet",
    "ReviewSummary",
    "SessionAborted",
    "SessionDone",
    "SessionState",
    "SubmitResult",
    # Resume
    "SessionSnapshot",
]
