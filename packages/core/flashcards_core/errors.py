"""Exceptions raised by the review engine and storage implementations."""


class FlashcardsError(Exception):
    """Base class for flashcards errors."""


class StorageError(FlashcardsError):
    """Raised by storage implementations when a request cannot be served."""


class NotFoundError(StorageError):
    """Raised when storage cannot resolve a deck or card reference."""

    def __init__(self, entity: str, key: object):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class SessionStateError(FlashcardsError):
    """Raised when a session operation is called in the wrong state."""


class InvalidChoiceError(FlashcardsError):
    """Raised when a submitted card is not one of the presented choices."""

    def __init__(self, card_id: int):
        super().__init__(f"Card {card_id} is not a choice of the current quiz")
        self.card_id = card_id
