"""Exceptions raised by the learning engine."""

from pathlib import Path
from typing import Union


class LearningError(Exception):
    """Base class for learning engine errors"""


class InvalidTradeError(LearningError, ValueError):
    """A trade outcome that cannot be recorded (malformed fields)"""


class PersistenceError(LearningError):
    """Saving or loading the trade ledger failed. In-memory state is untouched."""

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        super().__init__(f"{message} ({self.path})")
