"""Card sampler: draw distinct cards from a deck by ordinal probing."""

import random
from collections.abc import Iterable

from flashcards_core.schemas.cards import Card
from flashcards_core.storage.base import StoragePort
from flashcards_core.utils.logging import get_logger

logger = get_logger(__name__)


def next_ordinal(ordinal: int, deck_size: int) -> int:
    """Step one position forward, wrapping ``deck_size`` back to 1."""
    return (ordinal % deck_size) + 1


async def sample_cards(
    storage: StoragePort,
    deck_id: int,
    deck_size: int,
    count: int,
    *,
    exclude: Iterable[int] = (),
    skip_archived: bool = True,
    rng: random.Random | None = None,
) -> list[Card]:
    """Draw up to ``count`` distinct cards from a deck.

    Each slot starts at a uniformly random 1-based ordinal and probes forward,
    wrapping at the end of the deck, until it finds a card that is not
    excluded, not already drawn and, when ``skip_archived`` is set, not
    archived. If a probe visits every ordinal without success the draw stops
    and returns what it has so far.

    Args:
        storage: Storage port used for ordinal lookups
        deck_id: Deck to draw from
        deck_size: Number of cards in the deck
        count: Maximum number of cards to return
        exclude: Card ids that must not be drawn
        skip_archived: Whether archived cards are ineligible
        rng: Random source (defaults to the module-level generator)

    Returns:
        Drawn cards in draw order

    Raises:
        NotFoundError: If storage cannot resolve an ordinal within deck_size
    """
    if deck_size <= 0 or count <= 0:
        return []

    rng = rng or random.Random()
    excluded = set(exclude)
    chosen: list[Card] = []
    chosen_ids: set[int] = set()

    def eligible(card: Card) -> bool:
        if card.id in excluded or card.id in chosen_ids:
            return False
        return not (skip_archived and card.is_archived)

    for _ in range(count):
        ordinal = rng.randint(1, deck_size)
        card = await storage.get_card_by_offset(deck_id, ordinal)

        probes = 1
        while not eligible(card):
            if probes >= deck_size:
                logger.debug(
                    f"Deck {deck_id} exhausted after {len(chosen)} of {count} cards"
                )
                return chosen
            ordinal = next_ordinal(ordinal, deck_size)
            card = await storage.get_card_by_offset(deck_id, ordinal)
            probes += 1

        chosen.append(card)
        chosen_ids.add(card.id)

    return chosen
