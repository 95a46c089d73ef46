"""Review session controller.

A session draws a bounded set of cards from a deck, quizzes them one at a
time and keeps asking a missed card until it is answered correctly:

    >>> session = await start_session(storage, deck_id)
    >>> result = await session.present_next()
    >>> while result.kind == "quiz":
    ...     answer = await session.submit_answer(pick(result.choices))
    ...     result = await session.present_next()

Only the first attempt at each card is recorded in the outcome map, while
the deck's score counters move on every attempt. The deck record is read
fresh before each quiz and each scored attempt, so card edits and other
sessions on the same deck are seen as they happen. Storage failures end the
session with a ``SessionAborted`` result instead of raising.
"""

import random
from collections.abc import Callable
from datetime import datetime, timezone

from flashcards_core.config import ReviewConfig
from flashcards_core.errors import (
    InvalidChoiceError,
    NotFoundError,
    SessionStateError,
    StorageError,
)
from flashcards_core.review.distractors import build_quiz_set
from flashcards_core.review.evaluator import evaluate
from flashcards_core.review.sampler import sample_cards
from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.decks import Deck
from flashcards_core.schemas.review import (
    AnswerResult,
    InsufficientCards,
    Outcome,
    OutcomeEntry,
    PresentResult,
    QuizSet,
    ReviewSummary,
    SessionAborted,
    SessionDone,
    SessionState,
    SubmitResult,
)
from flashcards_core.schemas.snapshot import SessionSnapshot
from flashcards_core.storage.base import StoragePort
from flashcards_core.utils.logging import get_logger

logger = get_logger(__name__)

_ACTIVE_STATES = (
    SessionState.PRESENTING,
    SessionState.AWAITING_ANSWER,
    SessionState.SHOWING_ANSWER,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewSession:
    """State machine for one review run over a deck."""

    def __init__(
        self,
        storage: StoragePort,
        config: ReviewConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage
        self._config = config or ReviewConfig()
        self._rng = rng or random.Random()
        self._clock = clock

        self._state = SessionState.LOADING
        self._deck: Deck | None = None
        self._queue: list[Card] = []
        self._outcomes: dict[Card, Outcome] = {}
        self._current: Card | None = None
        self._quiz: QuizSet | None = None
        self._insufficient: InsufficientCards | None = None
        self._aborted: SessionAborted | None = None

    # ------------------------------------------------------------------ #
    #  Read-only views                                                     #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def deck(self) -> Deck | None:
        """Deck record as last read from storage."""
        return self._deck.model_copy() if self._deck else None

    @property
    def pending_queue(self) -> list[Card]:
        return list(self._queue)

    @property
    def current(self) -> Card | None:
        return self._current

    @property
    def correct_answer(self) -> Card | None:
        """The card just missed, while its correct answer is being shown."""
        if self._state == SessionState.SHOWING_ANSWER:
            return self._current
        return None

    # ------------------------------------------------------------------ #
    #  Lifecycle                                                           #
    # ------------------------------------------------------------------ #

    async def start(self, deck_id: int) -> SessionState:
        """Load the deck and seed the pending queue.

        Args:
            deck_id: Deck to review

        Returns:
            State after loading: presenting, done for an empty deck, or
            aborted if the deck or one of its cards cannot be found
        """
        if self._state != SessionState.LOADING:
            raise SessionStateError(f"Session already started ({self._state.value})")

        try:
            deck = await self._storage.get_deck(deck_id)
            cards = await sample_cards(
                self._storage,
                deck.id,
                deck.size,
                self._config.session_size,
                skip_archived=True,
                rng=self._rng,
            )
        except StorageError as e:
            self._abort(e)
            return self._state

        self._deck = deck
        self._queue = cards
        logger.info(
            f"Review of deck {deck.id} started with {len(cards)} cards "
            f"(deck size {deck.size})"
        )

        if not self._queue:
            self._finish()
        else:
            self._current = self._queue[0]
            self._transition(SessionState.PRESENTING)
        return self._state

    async def present_next(self) -> PresentResult:
        """Return the next thing for the host to show.

        While a quiz is awaiting an answer the same quiz is returned again.
        After a missed answer has been shown, calling this advances past it.
        """
        if self._state == SessionState.LOADING:
            raise SessionStateError("Session has not been started")
        if self._state == SessionState.SHOWING_ANSWER:
            self._advance()

        if self._state == SessionState.AWAITING_ANSWER:
            assert self._quiz is not None
            return self._quiz
        if self._state == SessionState.DONE:
            return SessionDone(outcomes=self._entries())
        if self._state == SessionState.INSUFFICIENT_CARDS:
            assert self._insufficient is not None
            return self._insufficient
        if self._state == SessionState.ABORTED:
            assert self._aborted is not None
            return self._aborted

        assert self._current is not None
        try:
            deck = await self._storage.get_deck(self._current.deck_id)
            result = await build_quiz_set(
                self._storage,
                self._current,
                deck,
                answer_count=self._config.answer_count,
                rng=self._rng,
            )
        except StorageError as e:
            return self._abort(e)
        self._deck = deck

        if isinstance(result, InsufficientCards):
            logger.warning(
                f"Deck {result.deck_id} has {result.available} usable cards, "
                f"{result.required} needed for a quiz"
            )
            self._insufficient = result
            self._transition(SessionState.INSUFFICIENT_CARDS)
            return result

        self._quiz = result
        self._transition(SessionState.AWAITING_ANSWER)
        return result

    async def submit_answer(self, chosen_card_id: int) -> SubmitResult:
        """Score the user's pick for the quiz currently shown.

        Args:
            chosen_card_id: Id of the card whose front the user picked

        Returns:
            The evaluation, or ``SessionAborted`` if the deck write failed

        Raises:
            SessionStateError: If no quiz is awaiting an answer
            InvalidChoiceError: If the card is not one of the quiz choices
        """
        if self._state != SessionState.AWAITING_ANSWER:
            raise SessionStateError(
                f"No quiz is awaiting an answer ({self._state.value})"
            )
        assert self._quiz is not None and self._current is not None

        chosen = self._quiz.choice(chosen_card_id)
        if chosen is None:
            raise InvalidChoiceError(chosen_card_id)

        target = self._current
        outcome = evaluate(chosen.front, target)
        first_attempt = target not in self._outcomes
        if first_attempt:
            self._outcomes[target] = outcome
        logger.debug(
            f"Card {target.id} answered {outcome.value}"
            f"{'' if first_attempt else ' (retry)'}"
        )

        try:
            deck = await self._storage.get_deck(target.deck_id)
            deck.record_answer(outcome, self._clock())
            await self._storage.update_deck(deck.model_copy())
        except StorageError as e:
            return self._abort(e)
        self._deck = deck

        self._quiz = None
        if outcome == Outcome.INCORRECT:
            self._queue.append(target)
            self._transition(SessionState.SHOWING_ANSWER)
        else:
            self._advance()

        return AnswerResult(
            outcome=outcome,
            card=target,
            chosen=chosen,
            first_attempt=first_attempt,
        )

    # ------------------------------------------------------------------ #
    #  Results                                                             #
    # ------------------------------------------------------------------ #

    def final_outcomes(self) -> dict[Card, Outcome]:
        """First-attempt outcome per card, in the order cards were first answered."""
        if not self._state.is_terminal:
            raise SessionStateError(
                f"Outcomes are final only once the session ends ({self._state.value})"
            )
        return dict(self._outcomes)

    def summary(self) -> ReviewSummary:
        return ReviewSummary(entries=self._entries())

    # ------------------------------------------------------------------ #
    #  Snapshot / restore                                                  #
    # ------------------------------------------------------------------ #

    def snapshot(self) -> SessionSnapshot:
        """Capture the session so it can be resumed elsewhere."""
        return SessionSnapshot(
            deck=self.deck,
            state=self._state,
            pending_queue=list(self._queue),
            outcomes=self._entries(),
            current=self._current,
            quiz=self._quiz,
            insufficient=self._insufficient,
            aborted=self._aborted,
        )

    def restore(self, snapshot: SessionSnapshot) -> None:
        """Resume from a snapshot exactly as captured.

        No storage call is made and nothing is re-sampled. The snapshot deck
        is kept for display only; the next quiz or answer reads it afresh.

        Raises:
            SessionStateError: If the snapshot is internally inconsistent
        """
        state = snapshot.state
        if state in _ACTIVE_STATES:
            if snapshot.current is None:
                raise SessionStateError(f"Snapshot in state {state.value} has no card")
            if snapshot.current not in snapshot.pending_queue:
                raise SessionStateError("Snapshot card is not in its pending queue")
        if state == SessionState.AWAITING_ANSWER:
            if snapshot.quiz is None:
                raise SessionStateError("Snapshot awaiting an answer has no quiz")
            if snapshot.quiz.target != snapshot.current:
                raise SessionStateError("Snapshot quiz is not for the current card")
        if state == SessionState.INSUFFICIENT_CARDS and snapshot.insufficient is None:
            raise SessionStateError("Insufficient-cards snapshot has no result")
        if state == SessionState.ABORTED and snapshot.aborted is None:
            raise SessionStateError("Aborted snapshot has no reason")

        self._deck = snapshot.deck.model_copy() if snapshot.deck else None
        self._state = snapshot.state
        self._queue = list(snapshot.pending_queue)
        self._outcomes = {entry.card: entry.outcome for entry in snapshot.outcomes}
        self._current = snapshot.current
        self._quiz = snapshot.quiz
        self._insufficient = snapshot.insufficient
        self._aborted = snapshot.aborted
        logger.info(
            f"Restored review session in state {self._state.value} with "
            f"{len(self._queue)} pending cards"
        )

    # ------------------------------------------------------------------ #
    #  Internals                                                           #
    # ------------------------------------------------------------------ #

    def _advance(self) -> None:
        assert self._current is not None
        self._queue.remove(self._current)
        self._quiz = None
        if self._queue:
            self._current = self._queue[0]
            self._transition(SessionState.PRESENTING)
        else:
            self._finish()

    def _finish(self) -> None:
        self._current = None
        self._transition(SessionState.DONE)
        correct = sum(1 for o in self._outcomes.values() if o == Outcome.CORRECT)
        logger.info(
            f"Review finished: {correct}/{len(self._outcomes)} correct on first try"
        )

    def _abort(self, error: StorageError) -> SessionAborted:
        if isinstance(error, NotFoundError):
            aborted = SessionAborted(
                reason=str(error), entity=error.entity, key=str(error.key)
            )
        else:
            aborted = SessionAborted(reason=str(error) or type(error).__name__)
        logger.error(f"Review session aborted: {aborted.reason}")
        self._aborted = aborted
        self._quiz = None
        self._transition(SessionState.ABORTED)
        return aborted

    def _entries(self) -> list[OutcomeEntry]:
        return [
            OutcomeEntry(card=card, outcome=outcome)
            for card, outcome in self._outcomes.items()
        ]

    def _transition(self, state: SessionState) -> None:
        logger.debug(f"Session state {self._state.value} -> {state.value}")
        self._state = state


async def start_session(
    storage: StoragePort,
    deck_id: int,
    config: ReviewConfig | None = None,
    *,
    rng: random.Random | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> ReviewSession:
    """Create a session for ``deck_id`` and load its cards.

    The returned session is the handle for every later call. If loading
    failed, its first ``present_next`` yields ``SessionAborted``.
    """
    session = ReviewSession(storage, config, rng=rng, clock=clock)
    await session.start(deck_id)
    return session
