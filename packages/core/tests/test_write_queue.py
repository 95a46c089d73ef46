"""Tests for the background deck write queue."""

import asyncio

import pytest

from flashcards_core.schemas.decks import Deck
from flashcards_core.storage.write_queue import DeckWriteQueue


class TestDeckWriteQueue:
    """Tests for ordering and failure handling."""

    @pytest.mark.asyncio
    async def test_writes_per_deck_keep_order(self) -> None:
        applied: list[tuple[int, int]] = []

        async def write(deck: Deck) -> None:
            # Later writes finish faster, so only pinning keeps them ordered
            await asyncio.sleep(0.01 * (5 - deck.correct_count))
            applied.append((deck.id, deck.correct_count))

        queue = DeckWriteQueue(write, workers=3)
        for count in range(5):
            queue.submit(Deck(id=7, title="A", correct_count=count))
            queue.submit(Deck(id=8, title="B", correct_count=count))
        await queue.close()

        assert [c for deck_id, c in applied if deck_id == 7] == [0, 1, 2, 3, 4]
        assert [c for deck_id, c in applied if deck_id == 8] == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_submitted_record_is_copied(self) -> None:
        applied: list[int] = []

        async def write(deck: Deck) -> None:
            applied.append(deck.correct_count)

        queue = DeckWriteQueue(write, workers=1)
        deck = Deck(id=1, title="A")
        queue.submit(deck)
        deck.correct_count = 5
        await queue.join()

        assert applied == [0]
        await queue.close()

    @pytest.mark.asyncio
    async def test_failed_write_does_not_stop_worker(self) -> None:
        applied: list[int] = []

        async def write(deck: Deck) -> None:
            if deck.correct_count == 1:
                raise RuntimeError("disk full")
            applied.append(deck.correct_count)

        queue = DeckWriteQueue(write, workers=1)
        for count in range(3):
            queue.submit(Deck(id=1, title="A", correct_count=count))
        await queue.close()

        assert applied == [0, 2]
        assert queue.failed_writes == 1

    def test_needs_a_worker(self) -> None:
        async def write(deck: Deck) -> None:
            pass

        with pytest.raises(ValueError):
            DeckWriteQueue(write, workers=0)

    @pytest.mark.asyncio
    async def test_pending_tracks_latest_unwritten_record(self) -> None:
        release = asyncio.Event()

        async def write(deck: Deck) -> None:
            await release.wait()

        queue = DeckWriteQueue(write, workers=1)
        queue.submit(Deck(id=1, title="A", correct_count=1))
        queue.submit(Deck(id=1, title="A", correct_count=2))

        pending = queue.pending(1)
        assert pending is not None and pending.correct_count == 2
        assert queue.pending(2) is None

        release.set()
        await queue.join()
        assert queue.pending(1) is None
        await queue.close()
