"""flashcards-core: Review-session engine for a personal flashcard tool.

A review session samples up to ten cards from a deck, skipping archived
ones, and quizzes each as a four-way multiple choice. Missed cards go back
to the end of the queue until they are answered correctly.

    >>> from flashcards_core import InMemoryStorage, start_session
    >>> storage = InMemoryStorage()
    >>> session = await start_session(storage, deck_id)
    >>> quiz = await session.present_next()
    >>> await session.submit_answer(quiz.choices[0].id)

Storage is injected through the ``StoragePort`` protocol; ``InMemoryStorage``
and ``SqlStorage`` implement it together with deck and card CRUD.
"""

from flashcards_core.config import ReviewConfig
from flashcards_core.errors import (
    FlashcardsError,
    InvalidChoiceError,
    NotFoundError,
    SessionStateError,
    StorageError,
)
from flashcards_core.review import ReviewSession, build_quiz_set, sample_cards
from flashcards_core.review.session import start_session
from flashcards_core.schemas import (
    AnswerResult,
    Card,
    CardStatus,
    Deck,
    InsufficientCards,
    Outcome,
    QuizSet,
    SessionAborted,
    SessionDone,
    SessionSnapshot,
    SessionState,
)
from flashcards_core.storage import InMemoryStorage, SqlStorage, StoragePort

__version__ = "0.1.0"

__all__ = [
    # Sessions
    "ReviewConfig",
    "ReviewSession",
    "start_session",
    "build_quiz_set",
    "sample_cards",
    # Schemas
    "AnswerResult",
    "Card",
    "CardStatus",
    "Deck",
    "InsufficientCards",
    "Outcome",
    "QuizSet",
    "SessionAborted",
    "SessionDone",
    "SessionSnapshot",
    "SessionState",
    # Storage
    "InMemoryStorage",
    "SqlStorage",
    "StoragePort",
    # Errors
    "FlashcardsError",
    "InvalidChoiceError",
    "NotFoundError",
    "SessionStateError",
    "StorageError",
]
