"""Bounded conversation history kept for the lifetime of the process."""

from collections import deque
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from pdf_chat.config import HISTORY_LIMIT

NO_HISTORY = "No previous conversation."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationTurn(BaseModel):
    """A single answered question."""

    question: str
    answer: str
    timestamp: datetime = Field(default_factory=_utcnow)


class HistoryBuffer:
    """FIFO of the last few question/answer pairs.

    Appending beyond ``limit`` evicts the oldest turn. Not thread-safe; the
    CLI loop is the only user.
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self._turns: deque[ConversationTurn] = deque()

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)
        while len(self._turns) > self.limit:
            self._turns.popleft()

    def record(self, question: str, answer: str) -> ConversationTurn:
        """Timestamp a new turn and append it."""
        turn = ConversationTurn(question=question, answer=answer)
        self.append(turn)
        return turn

    def clear(self) -> None:
        self._turns.clear()

    @property
    def turns(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def format(self) -> str:
        """Render the turns as a numbered transcript, oldest first."""
        if not self._turns:
            return NO_HISTORY
        return "\n\n".join(
            f"[Turn {i}]\nUser: {turn.question}\nAssistant: {turn.answer}"
            for i, turn in enumerate(self._turns, 1)
        )

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self):
        return iter(tuple(self._turns))
