"""Storage port consumed by the review engine."""

from typing import Protocol, runtime_checkable

from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.decks import Deck


@runtime_checkable
class StoragePort(Protocol):
    """Deck and card access needed by a review session.

    Lookups raise ``NotFoundError`` when the id or ordinal does not resolve.
    ``update_deck`` overwrites the full record; implementations may apply it
    later, but must apply writes for one deck in the order they were made.
    """

    async def get_deck(self, deck_id: int) -> Deck:
        """Fetch a deck by id."""
        ...

    async def get_card_by_offset(self, deck_id: int, ordinal: int) -> Card:
        """Fetch the card at a 1-based position within a deck.

        Args:
            deck_id: Deck to look in
            ordinal: Position in ``[1, deck.size]``, cards ordered by id

        Returns:
            The card at that position
        """
        ...

    async def get_card(self, card_id: int) -> Card:
        """Fetch a card by id."""
        ...

    async def update_deck(self, deck: Deck) -> None:
        """Persist a deck record, replacing the stored one."""
        ...
