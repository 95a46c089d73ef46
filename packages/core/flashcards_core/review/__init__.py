"""Review-session engine.

The controller in ``session`` drives a run; ``sampler``, ``distractors`` and
``evaluator`` are the pure steps it calls.
"""

from flashcards_core.review.distractors import build_quiz_set, shuffle_choices
from flashcards_core.review.evaluator import evaluate
from flashcards_core.review.sampler import next_ordinal, sample_cards
from flashcards_core.review.session import ReviewSession, start_session

__all__ = [
    "ReviewSession",
    "build_quiz_set",
    "evaluate",
    "next_ordinal",
    "sample_cards",
    "shuffle_choices",
    "start_session",
]
