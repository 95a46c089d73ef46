"""Shared fixtures for review engine tests."""

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timedelta, timezone

import pytest

from flashcards_core.schemas.cards import Card, CardStatus
from flashcards_core.schemas.decks import Deck
from flashcards_core.schemas.review import QuizSet
from flashcards_core.storage.memory import InMemoryStorage

DeckFactory = Callable[..., Awaitable[Deck]]


class RecordingStorage(InMemoryStorage):
    """In-memory storage that records ordinal lookups and deck writes."""

    def __init__(self) -> None:
        super().__init__()
        self.offset_calls: list[int] = []
        self.deck_writes: list[Deck] = []

    async def get_card_by_offset(self, deck_id: int, ordinal: int) -> Card:
        self.offset_calls.append(ordinal)
        return await super().get_card_by_offset(deck_id, ordinal)

    async def update_deck(self, deck: Deck) -> None:
        self.deck_writes.append(deck.model_copy())
        await super().update_deck(deck)


class SteppingClock:
    """Clock that advances one second per call."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def make_deck(storage: RecordingStorage) -> DeckFactory:
    """Create a deck with numbered cards, archiving the given positions."""

    async def factory(
        card_count: int,
        archived: Sequence[int] = (),
        title: str = "Spanish",
    ) -> Deck:
        deck = await storage.add_deck(title)
        for i in range(1, card_count + 1):
            await storage.add_card(
                deck.id,
                front=f"front {i}",
                back=f"back {i}",
                status=CardStatus.ARCHIVED if i in archived else CardStatus.NEW,
            )
        return await storage.get_deck(deck.id)

    return factory


def correct_choice(quiz: QuizSet) -> int:
    return quiz.target.id


def wrong_choice(quiz: QuizSet) -> int:
    return next(
        card.id for card in quiz.choices if card.front != quiz.target.front
    )
