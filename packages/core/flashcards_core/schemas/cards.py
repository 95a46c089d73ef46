"""Flashcard schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class CardStatus(str, Enum):
    """Learning status of a card."""

    NEW = "new"
    STILL_LEARNING = "still_learning"
    LEARNED = "learned"
    ARCHIVED = "archived"


class Card(BaseModel):
    """A front/back text pair belonging to one deck.

    The back of a card is shown as the question and the front is the answer
    the user has to pick. Cards compare and hash by id so a re-fetched record
    still matches the one already queued in a session.
    """

    id: int = Field(..., description="Unique card id")
    front: str = Field(..., description="Answer side")
    back: str = Field(..., description="Question side")
    status: CardStatus = Field(CardStatus.NEW, description="Learning status")
    deck_id: int = Field(..., description="Owning deck id")

    @property
    def is_archived(self) -> bool:
        return self.status == CardStatus.ARCHIVED

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
