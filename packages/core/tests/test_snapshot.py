"""Tests for session snapshot and restore."""

import random

import pytest

from conftest import DeckFactory, RecordingStorage, correct_choice, wrong_choice
from flashcards_core.config import ReviewConfig
from flashcards_core.errors import SessionStateError
from flashcards_core.review.session import ReviewSession, start_session
from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.review import (
    InsufficientCards,
    Outcome,
    QuizSet,
    SessionAborted,
    SessionDone,
    SessionState,
)
from flashcards_core.schemas.snapshot import SessionSnapshot
from flashcards_core.storage.memory import InMemoryStorage

_CARDS = [
    Card(id=i, front=f"front {i}", back=f"back {i}", deck_id=1) for i in range(1, 5)
]


async def _answer_until_done(session: ReviewSession) -> SessionDone:
    while True:
        result = await session.present_next()
        if isinstance(result, SessionDone):
            return result
        assert isinstance(result, QuizSet)
        await session.submit_answer(correct_choice(result))


class TestSnapshot:
    """Tests for capturing and resuming sessions."""

    @pytest.mark.asyncio
    async def test_round_trip_after_miss(
        self, storage: RecordingStorage, make_deck: DeckFactory
    ) -> None:
        deck = await make_deck(10)
        session = await start_session(storage, deck.id, rng=random.Random(21))
        quiz = await session.present_next()
        assert isinstance(quiz, QuizSet)
        await session.submit_answer(correct_choice(quiz))
        quiz = await session.present_next()
        assert isinstance(quiz, QuizSet)
        await session.submit_answer(wrong_choice(quiz))

        payload = session.snapshot().model_dump_json()
        restored = ReviewSession(storage, rng=random.Random(22))
        restored.restore(SessionSnapshot.model_validate_json(payload))

        assert restored.state == SessionState.SHOWING_ANSWER
        assert [c.id for c in restored.pending_queue] == [
            c.id for c in session.pending_queue
        ]
        assert restored.summary() == session.summary()
        assert restored.correct_answer == quiz.target
        assert restored.deck == session.deck

        done = await _answer_until_done(restored)
        assert len(done.outcomes) == 10
        assert done.outcomes[0].outcome == Outcome.CORRECT
        assert done.outcomes[1].outcome == Outcome.INCORRECT
        assert done.outcomes[1].card == quiz.target

    @pytest.mark.asyncio
    async def test_in_flight_quiz_is_reproduced(
        self, storage: RecordingStorage, make_deck: DeckFactory
    ) -> None:
        deck = await make_deck(10)
        session = await start_session(storage, deck.id, rng=random.Random(23))
        quiz = await session.present_next()
        assert isinstance(quiz, QuizSet)

        snapshot = SessionSnapshot.model_validate_json(
            session.snapshot().model_dump_json()
        )
        # An empty store proves the quiz is not rebuilt from storage
        restored = ReviewSession(InMemoryStorage())
        restored.restore(snapshot)
        again = await restored.present_next()

        assert isinstance(again, QuizSet)
        assert [c.id for c in again.choices] == [c.id for c in quiz.choices]
        assert again.target == quiz.target

    @pytest.mark.asyncio
    async def test_terminal_state_survives(
        self, storage: RecordingStorage, make_deck: DeckFactory
    ) -> None:
        deck = await make_deck(2)
        session = await start_session(storage, deck.id, rng=random.Random(24))
        result = await session.present_next()
        assert isinstance(result, InsufficientCards)

        restored = ReviewSession(storage)
        restored.restore(session.snapshot())

        assert restored.state == SessionState.INSUFFICIENT_CARDS
        assert await restored.present_next() == result

    @pytest.mark.asyncio
    async def test_restored_outcome_order(
        self, storage: RecordingStorage, make_deck: DeckFactory
    ) -> None:
        deck = await make_deck(6)
        session = await start_session(
            storage, deck.id, ReviewConfig(session_size=3), rng=random.Random(25)
        )
        for _ in range(2):
            quiz = await session.present_next()
            assert isinstance(quiz, QuizSet)
            await session.submit_answer(wrong_choice(quiz))

        restored = ReviewSession(storage)
        restored.restore(session.snapshot())

        assert [e.card.id for e in restored.summary().entries] == [
            e.card.id for e in session.summary().entries
        ]

    @pytest.mark.parametrize(
        "snapshot",
        [
            SessionSnapshot(state=SessionState.AWAITING_ANSWER),
            SessionSnapshot(state=SessionState.PRESENTING, pending_queue=_CARDS),
            SessionSnapshot(
                state=SessionState.SHOWING_ANSWER,
                pending_queue=_CARDS[1:],
                current=_CARDS[0],
            ),
            SessionSnapshot(
                state=SessionState.AWAITING_ANSWER,
                pending_queue=_CARDS,
                current=_CARDS[0],
            ),
            SessionSnapshot(
                state=SessionState.AWAITING_ANSWER,
                pending_queue=_CARDS,
                current=_CARDS[0],
                quiz=QuizSet(target=_CARDS[1], choices=_CARDS),
            ),
            SessionSnapshot(state=SessionState.INSUFFICIENT_CARDS),
            SessionSnapshot(state=SessionState.ABORTED),
        ],
        ids=[
            "awaiting-empty",
            "presenting-no-card",
            "card-not-queued",
            "awaiting-no-quiz",
            "quiz-for-other-card",
            "insufficient-no-result",
            "aborted-no-reason",
        ],
    )
    def test_inconsistent_snapshot_rejected(self, snapshot: SessionSnapshot) -> None:
        session = ReviewSession(InMemoryStorage())

        with pytest.raises(SessionStateError):
            session.restore(snapshot)
        assert session.state == SessionState.LOADING

    @pytest.mark.asyncio
    async def test_restored_aborted_session_stays_aborted(self) -> None:
        aborted = SessionAborted(reason="deck not found: 3", entity="deck", key="3")
        session = ReviewSession(InMemoryStorage())
        session.restore(SessionSnapshot(state=SessionState.ABORTED, aborted=aborted))

        assert await session.present_next() == aborted
        assert session.final_outcomes() == {}

    @pytest.mark.asyncio
    async def test_restored_session_reads_current_deck(
        self, storage: RecordingStorage, make_deck: DeckFactory
    ) -> None:
        deck = await make_deck(10)
        session = await start_session(storage, deck.id, rng=random.Random(26))
        snapshot = session.snapshot()
        for card in await storage.cards_in_deck(deck.id):
            if card != snapshot.current:
                await storage.delete_card(card.id)
                break

        restored = ReviewSession(storage, rng=random.Random(27))
        restored.restore(snapshot)
        quiz = await restored.present_next()

        assert isinstance(quiz, QuizSet)
        assert restored.deck is not None and restored.deck.size == 9
