"""Answer evaluation."""

from flashcards_core.schemas.cards import Card
from flashcards_core.schemas.review import Outcome


def evaluate(chosen_front: str, target: Card) -> Outcome:
    """Compare the chosen answer text with the target's front, exactly."""
    if chosen_front == target.front:
        return Outcome.CORRECT
    return Outcome.INCORRECT
