"""Review session schemas.

Every value handed back across the session boundary is one of the tagged
models below, discriminated by its ``kind`` field.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from flashcards_core.schemas.cards import Card


class Outcome(str, Enum):
    """Result of evaluating one answer."""

    CORRECT = "correct"
    INCORRECT = "incorrect"


class SessionState(str, Enum):
    """Controller states of a review session."""

    LOADING = "loading"
    PRESENTING = "presenting"
    AWAITING_ANSWER = "awaiting_answer"
    SHOWING_ANSWER = "showing_answer"
    DONE = "done"
    INSUFFICIENT_CARDS = "insufficient_cards"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SessionState.DONE,
            SessionState.INSUFFICIENT_CARDS,
            SessionState.ABORTED,
        )


class QuizSet(BaseModel):
    """A multiple-choice question: the target card plus distractors."""

    kind: Literal["quiz"] = "quiz"
    target: Card = Field(..., description="Card being asked")
    choices: list[Card] = Field(..., description="Candidate answers in display order")

    @model_validator(mode="after")
    def _check_choices(self) -> "QuizSet":
        ids = [card.id for card in self.choices]
        if len(set(ids)) != len(ids):
            raise ValueError("quiz choices must be distinct cards")
        if self.target.id not in ids:
            raise ValueError("quiz choices must contain the target card")
        return self

    @property
    def prompt(self) -> str:
        """Question text shown to the user."""
        return self.target.back

    @property
    def correct_index(self) -> int:
        return next(
            i for i, card in enumerate(self.choices) if card.id == self.target.id
        )

    def choice(self, card_id: int) -> Card | None:
        return next((card for card in self.choices if card.id == card_id), None)


class InsufficientCards(BaseModel):
    """The deck cannot supply enough distinct cards for a quiz."""

    kind: Literal["insufficient_cards"] = "insufficient_cards"
    deck_id: int
    required: int
    available: int


class OutcomeEntry(BaseModel):
    """First-attempt outcome of one card."""

    card: Card
    outcome: Outcome


class SessionDone(BaseModel):
    """Normal completion, carrying the ordered first-attempt outcomes."""

    kind: Literal["done"] = "done"
    outcomes: list[OutcomeEntry] = Field(default_factory=list)


class SessionAborted(BaseModel):
    """The session was stopped by a storage failure."""

    kind: Literal["aborted"] = "aborted"
    reason: str
    entity: str | None = None
    key: str | None = None


class AnswerResult(BaseModel):
    """Evaluation of a submitted answer."""

    kind: Literal["answer"] = "answer"
    outcome: Outcome
    card: Card = Field(..., description="Card that was asked")
    chosen: Card = Field(..., description="Card the user picked")
    first_attempt: bool = Field(
        ..., description="Whether this attempt was recorded in the outcome map"
    )


class ReviewSummary(BaseModel):
    """End-of-session reviewed list."""

    entries: list[OutcomeEntry] = Field(default_factory=list)

    @property
    def correct(self) -> int:
        return sum(1 for e in self.entries if e.outcome == Outcome.CORRECT)

    @property
    def incorrect(self) -> int:
        return sum(1 for e in self.entries if e.outcome == Outcome.INCORRECT)


PresentResult = Annotated[
    Union[QuizSet, InsufficientCards, SessionDone, SessionAborted],
    Field(discriminator="kind"),
]

SubmitResult = Annotated[
    Union[AnswerResult, SessionAborted],
    Field(discriminator="kind"),
]
