"""Storage port and its implementations."""

from flashcards_core.storage.base import StoragePort
from flashcards_core.storage.memory import InMemoryStorage
from flashcards_core.storage.sql import SqlStorage
from flashcards_core.storage.write_queue import DeckWriteQueue

__all__ = [
    "DeckWriteQueue",
    "InMemoryStorage",
    "SqlStorage",
    "StoragePort",
]
