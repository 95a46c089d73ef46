"""In-process storage backed by dictionaries."""

from itertools import count

from flashcards_core.errors import NotFoundError
from flashcards_core.schemas.cards import Card, CardStatus
from flashcards_core.schemas.decks import Deck
from flashcards_core.utils.logging import get_logger

logger = get_logger(__name__)


class InMemoryStorage:
    """Storage port with the full deck and card CRUD surface.

    Records are copied on the way in and out so callers never share state
    with the store. Deck ``size`` is maintained on card insert and delete.
    """

    def __init__(self) -> None:
        self._decks: dict[int, Deck] = {}
        self._cards: dict[int, Card] = {}
        self._deck_ids = count(1)
        self._card_ids = count(1)

    # ------------------------------------------------------------------ #
    #  Port methods                                                        #
    # ------------------------------------------------------------------ #

    async def get_deck(self, deck_id: int) -> Deck:
        deck = self._decks.get(deck_id)
        if deck is None:
            raise NotFoundError("deck", deck_id)
        return deck.model_copy()

    async def get_card_by_offset(self, deck_id: int, ordinal: int) -> Card:
        cards = self._deck_cards(deck_id)
        if ordinal < 1 or ordinal > len(cards):
            raise NotFoundError("card", f"deck {deck_id} ordinal {ordinal}")
        return cards[ordinal - 1].model_copy()

    async def get_card(self, card_id: int) -> Card:
        card = self._cards.get(card_id)
        if card is None:
            raise NotFoundError("card", card_id)
        return card.model_copy()

    async def update_deck(self, deck: Deck) -> None:
        stored = self._decks.get(deck.id)
        if stored is None:
            raise NotFoundError("deck", deck.id)
        # size is owned by card insert/delete, never by a deck overwrite
        self._decks[deck.id] = deck.model_copy(update={"size": stored.size})

    # ------------------------------------------------------------------ #
    #  CRUD                                                                #
    # ------------------------------------------------------------------ #

    async def add_deck(self, title: str) -> Deck:
        deck = Deck(id=next(self._deck_ids), title=title)
        self._decks[deck.id] = deck
        logger.debug(f"Added deck {deck.id} ({title!r})")
        return deck.model_copy()

    async def add_card(
        self,
        deck_id: int,
        front: str,
        back: str,
        status: CardStatus = CardStatus.NEW,
    ) -> Card:
        deck = self._decks.get(deck_id)
        if deck is None:
            raise NotFoundError("deck", deck_id)
        card = Card(
            id=next(self._card_ids),
            front=front,
            back=back,
            status=status,
            deck_id=deck_id,
        )
        self._cards[card.id] = card
        deck.increment_size()
        return card.model_copy()

    async def update_card(self, card: Card) -> None:
        """Replace a card's text and status, moving it between decks if needed."""
        existing = self._cards.get(card.id)
        if existing is None:
            raise NotFoundError("card", card.id)
        if existing.deck_id != card.deck_id:
            if card.deck_id not in self._decks:
                raise NotFoundError("deck", card.deck_id)
            self._decks[existing.deck_id].decrement_size()
            self._decks[card.deck_id].increment_size()
        self._cards[card.id] = card.model_copy()

    async def delete_card(self, card_id: int) -> None:
        card = self._cards.pop(card_id, None)
        if card is None:
            raise NotFoundError("card", card_id)
        self._decks[card.deck_id].decrement_size()

    async def delete_deck(self, deck_id: int) -> None:
        if self._decks.pop(deck_id, None) is None:
            raise NotFoundError("deck", deck_id)
        for card_id in [c.id for c in self._cards.values() if c.deck_id == deck_id]:
            del self._cards[card_id]

    async def list_decks(self) -> list[Deck]:
        return [deck.model_copy() for deck in self._decks.values()]

    async def cards_in_deck(self, deck_id: int) -> list[Card]:
        return [card.model_copy() for card in self._deck_cards(deck_id)]

    async def search_cards(self, text: str) -> list[Card]:
        """Find cards whose front or back contains ``text``, ignoring case."""
        needle = text.lower()
        return [
            card.model_copy()
            for card in sorted(self._cards.values(), key=lambda c: c.id)
            if needle in card.front.lower() or needle in card.back.lower()
        ]

    def _deck_cards(self, deck_id: int) -> list[Card]:
        return sorted(
            (c for c in self._cards.values() if c.deck_id == deck_id),
            key=lambda c: c.id,
        )
