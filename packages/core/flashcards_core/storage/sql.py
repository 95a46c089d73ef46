"""SQLAlchemy-backed storage for decks and cards."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from flashcards_core.errors import NotFoundError
from flashcards_core.schemas.cards import Card, CardStatus
from flashcards_core.schemas.decks import Deck
from flashcards_core.settings import Settings, settings as default_settings
from flashcards_core.storage.models import Base, CardRecord, DeckRecord
from flashcards_core.storage.write_queue import DeckWriteQueue
from flashcards_core.utils.logging import get_logger
from flashcards_core.utils.retry import with_retry

logger = get_logger(__name__)


def _deck_from_record(record: DeckRecord) -> Deck:
    return Deck(
        id=record.id,
        title=record.title,
        size=record.size,
        correct_count=record.correct_count,
        wrong_count=record.wrong_count,
        last_reviewed_at=record.last_reviewed_at,
    )


def _card_from_record(record: CardRecord) -> Card:
    return Card(
        id=record.id,
        front=record.front,
        back=record.back,
        status=CardStatus(record.status),
        deck_id=record.deck_id,
    )


class SqlStorage:
    """Storage port over an async SQLAlchemy engine.

    Reads go straight to the database. ``update_deck`` hands the record to a
    ``DeckWriteQueue`` and returns at once. Until that write lands,
    ``get_deck`` reports the queued scores in place of the stored ones. Call
    ``flush`` to wait for the queued writes and ``close`` before discarding
    the storage.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        config: Settings | None = None,
        engine: AsyncEngine | None = None,
    ) -> None:
        self._settings = config or default_settings
        self._engine = engine or create_async_engine(
            database_url or self._settings.database_url,
            echo=self._settings.database_echo,
        )
        self._session_maker = async_sessionmaker(self._engine, expire_on_commit=False)
        self._writes = DeckWriteQueue(
            self._write_deck, workers=self._settings.write_workers
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def failed_writes(self) -> int:
        return self._writes.failed_writes

    async def init_db(self) -> None:
        """Create tables that do not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def flush(self) -> None:
        """Wait for queued deck writes to be applied."""
        if self._writes.started:
            await self._writes.join()

    async def close(self) -> None:
        await self._writes.close()
        await self._engine.dispose()

    # ------------------------------------------------------------------ #
    #  Port methods                                                        #
    # ------------------------------------------------------------------ #

    async def get_deck(self, deck_id: int) -> Deck:
        # Queued scores win over the table until their write lands. Taken
        # before the read, since a write may land while it is in flight.
        queued = self._writes.pending(deck_id)
        async with self._session_maker() as db:
            record = await db.get(DeckRecord, deck_id)
            if record is None:
                raise NotFoundError("deck", deck_id)
            deck = _deck_from_record(record)

        if queued is not None:
            deck = queued.model_copy(update={"size": deck.size})
        return deck

    async def get_card_by_offset(self, deck_id: int, ordinal: int) -> Card:
        if ordinal < 1:
            raise NotFoundError("card", f"deck {deck_id} ordinal {ordinal}")
        async with self._session_maker() as db:
            result = await db.execute(
                select(CardRecord)
                .where(CardRecord.deck_id == deck_id)
                .order_by(CardRecord.id)
                .limit(1)
                .offset(ordinal - 1)
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise NotFoundError("card", f"deck {deck_id} ordinal {ordinal}")
            return _card_from_record(record)

    async def get_card(self, card_id: int) -> Card:
        async with self._session_maker() as db:
            record = await db.get(CardRecord, card_id)
            if record is None:
                raise NotFoundError("card", card_id)
            return _card_from_record(record)

    async def update_deck(self, deck: Deck) -> None:
        self._writes.submit(deck)

    async def _write_deck(self, deck: Deck) -> None:
        await with_retry(
            self._overwrite_deck,
            deck,
            max_attempts=self._settings.write_max_attempts,
            operation_name=f"update deck {deck.id}",
        )

    async def _overwrite_deck(self, deck: Deck) -> None:
        # size is owned by card insert/delete, never by a deck overwrite
        async with self._session_maker() as db, db.begin():
            record = await db.get(DeckRecord, deck.id)
            if record is None:
                raise NotFoundError("deck", deck.id)
            record.title = deck.title
            record.correct_count = deck.correct_count
            record.wrong_count = deck.wrong_count
            record.last_reviewed_at = deck.last_reviewed_at

    # ------------------------------------------------------------------ #
    #  CRUD                                                                #
    # ------------------------------------------------------------------ #

    async def add_deck(self, title: str) -> Deck:
        async with self._session_maker() as db, db.begin():
            record = DeckRecord(
                title=title,
                size=0,
                correct_count=0,
                wrong_count=0,
                last_reviewed_at=None,
            )
            db.add(record)
            await db.flush()
            logger.debug(f"Added deck {record.id} ({title!r})")
            return _deck_from_record(record)

    async def add_card(
        self,
        deck_id: int,
        front: str,
        back: str,
        status: CardStatus = CardStatus.NEW,
    ) -> Card:
        async with self._session_maker() as db, db.begin():
            deck = await db.get(DeckRecord, deck_id)
            if deck is None:
                raise NotFoundError("deck", deck_id)
            record = CardRecord(
                deck_id=deck_id, front=front, back=back, status=status.value
            )
            db.add(record)
            deck.size += 1
            await db.flush()
            return _card_from_record(record)

    async def update_card(self, card: Card) -> None:
        """Replace a card's text and status, moving it between decks if needed."""
        async with self._session_maker() as db, db.begin():
            record = await db.get(CardRecord, card.id)
            if record is None:
                raise NotFoundError("card", card.id)
            if record.deck_id != card.deck_id:
                await self._move_card(db, record, card.deck_id)
            record.front = card.front
            record.back = card.back
            record.status = card.status.value

    async def delete_card(self, card_id: int) -> None:
        async with self._session_maker() as db, db.begin():
            record = await db.get(CardRecord, card_id)
            if record is None:
                raise NotFoundError("card", card_id)
            deck = await db.get(DeckRecord, record.deck_id)
            if deck is not None:
                deck.size = max(0, deck.size - 1)
            await db.delete(record)

    async def delete_deck(self, deck_id: int) -> None:
        async with self._session_maker() as db, db.begin():
            record = await db.get(DeckRecord, deck_id)
            if record is None:
                raise NotFoundError("deck", deck_id)
            cards = await db.execute(
                select(CardRecord).where(CardRecord.deck_id == deck_id)
            )
            for card in cards.scalars().all():
                await db.delete(card)
            await db.delete(record)

    async def list_decks(self) -> list[Deck]:
        async with self._session_maker() as db:
            result = await db.execute(select(DeckRecord).order_by(DeckRecord.id))
            return [_deck_from_record(r) for r in result.scalars().all()]

    async def cards_in_deck(self, deck_id: int) -> list[Card]:
        async with self._session_maker() as db:
            result = await db.execute(
                select(CardRecord)
                .where(CardRecord.deck_id == deck_id)
                .order_by(CardRecord.id)
            )
            return [_card_from_record(r) for r in result.scalars().all()]

    async def search_cards(self, text: str) -> list[Card]:
        """Find cards whose front or back contains ``text``, ignoring case."""
        pattern = f"%{text.lower()}%"
        async with self._session_maker() as db:
            result = await db.execute(
                select(CardRecord)
                .where(
                    or_(
                        func.lower(CardRecord.front).like(pattern),
                        func.lower(CardRecord.back).like(pattern),
                    )
                )
                .order_by(CardRecord.id)
            )
            return [_card_from_record(r) for r in result.scalars().all()]

    async def _move_card(
        self, db: AsyncSession, record: CardRecord, deck_id: int
    ) -> None:
        target = await db.get(DeckRecord, deck_id)
        if target is None:
            raise NotFoundError("deck", deck_id)
        source = await db.get(DeckRecord, record.deck_id)
        if source is not None:
            source.size = max(0, source.size - 1)
        target.size += 1
        record.deck_id = deck_id
