"""In-memory UnitOfWork: snapshots participating stores and restores them on failure."""

from typing import Any, Callable, TypeVar

T = TypeVar('T')


class FakeUnitOfWork:
    def __init__(self, *participants):
        self.participants = participants
        self.committed = 0
        self.rolled_back = 0

    def run(self, work: Callable[[Any], T]) -> T:
        snapshots = [p.snapshot() for p in self.participants]
        try:
            result = work(None)
        except Exception:
            for participant, snapshot in zip(self.participants, snapshots):
                participant.restore(snapshot)
            self.rolled_back += 1
            raise
        self.committed += 1
        return result
