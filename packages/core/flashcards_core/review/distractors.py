"""Distractor selection for multiple-choice questions."""

import random

from flashcards_core.config import DEFAULT_ANSWER_COUNT
from flashcards_core.review.sampler import sample_cards
from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.decks import Deck
from flashcards_core.schemas.review import InsufficientCards, QuizSet
from flashcards_core.storage.base import StoragePort


def shuffle_choices(cards: list[Card], rng: random.Random) -> list[Card]:
    """Fill display slots by repeatedly taking a random remaining card."""
    remaining = list(cards)
    ordered: list[Card] = []
    while remaining:
        ordered.append(remaining.pop(rng.randrange(len(remaining))))
    return ordered


async def build_quiz_set(
    storage: StoragePort,
    target: Card,
    deck: Deck,
    *,
    answer_count: int = DEFAULT_ANSWER_COUNT,
    rng: random.Random | None = None,
) -> QuizSet | InsufficientCards:
    """Build a quiz for ``target`` with distractors drawn from its deck.

    Distractors may be archived cards; only the target is excluded. When the
    deck cannot supply ``answer_count`` distinct cards the result is an
    ``InsufficientCards`` signal instead of a quiz.

    Raises:
        NotFoundError: If storage cannot resolve an ordinal within the deck size
    """
    rng = rng or random.Random()
    distractors = await sample_cards(
        storage,
        deck.id,
        deck.size,
        answer_count - 1,
        exclude={target.id},
        skip_archived=False,
        rng=rng,
    )

    candidates = [target, *distractors]
    if len(candidates) < answer_count:
        return InsufficientCards(
            deck_id=deck.id, required=answer_count, available=len(candidates)
        )

    return QuizSet(target=target, choices=shuffle_choices(candidates, rng))
